# routes.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from shop_api.auth import bearer_scheme, check_password, make_password, verify_token
from shop_api.database import get_session
from shop_api.limiter import api_limit
from shop_api.models import (
    MAX_ID, Credentials, Customer, CustomerUpdate, Product, ProductUpdate, Token, User, UserCreate,
)
from shop_api.repository import (
    CustomerRepository,
    ProductRepository,
    RecordNotFound,
    TokenRepository,
    UserRepository,
)

log = logging.getLogger(__name__)

router = APIRouter()

# Dependency injection functions; each request gets its own session
def get_customer_repo(session: Session = Depends(get_session)) -> CustomerRepository:
    return CustomerRepository(session)

def get_product_repo(session: Session = Depends(get_session)) -> ProductRepository:
    return ProductRepository(session)

def get_user_repo(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)

def get_token_repo(session: Session = Depends(get_session)) -> TokenRepository:
    return TokenRepository(session)

# --------- Helpers ---------

def error_response(exc: Exception) -> JSONResponse:
    """500 with the error class only; the underlying message stays in the log."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": type(exc).__name__, "message": "The request could not be completed."},
    )

def not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": message})

def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """App-level fallback for database errors raised outside a controller (e.g. in `verify_token`)."""
    log.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(exc)

# ==============================================================================
# --- CUSTOMER ENDPOINTS ---
# ==============================================================================

@router.post("/customers", response_model=Customer)
@api_limit
def create_customer(request: Request, customer: Customer, repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        return repo.create(customer)
    except SQLAlchemyError as e:
        log.error(f"Customer create failed: {e}", exc_info=True)
        return error_response(e)

@router.put("/customers", response_model=Customer)
@api_limit
def update_customer(request: Request, customer: CustomerUpdate, repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        return repo.update(customer.id, customer.model_dump(exclude_unset=True, exclude={"id"}))
    except (SQLAlchemyError, RecordNotFound) as e:
        log.error(f"Customer update failed for id {customer.id}: {e}", exc_info=True)
        return error_response(e)

@router.delete("/customers/{customer_id}", response_model=Customer)
@api_limit
def delete_customer(request: Request, customer_id: int = Path(ge=1, le=MAX_ID), repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        return repo.delete(customer_id)
    except (SQLAlchemyError, RecordNotFound) as e:
        log.error(f"Customer delete failed for id {customer_id}: {e}", exc_info=True)
        return error_response(e)

@router.get("/customers/q/{term}", response_model=List[Customer])
@api_limit
def search_customers(request: Request, term: str, repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        customers = repo.search(term)
    except SQLAlchemyError as e:
        log.error(f"Customer search failed for term {term!r}: {e}", exc_info=True)
        return error_response(e)
    if not customers:
        return not_found("Customer not found!")
    return customers

@router.get("/customers/{customer_id}", response_model=Customer)
def get_customer(customer_id: int = Path(ge=1, le=MAX_ID), repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        customer = repo.get(customer_id)
    except SQLAlchemyError as e:
        log.error(f"Customer lookup failed for id {customer_id}: {e}", exc_info=True)
        return error_response(e)
    if not customer:
        return not_found("Customer not found!")
    return customer

# Token check runs as a dependency, before the rate limiter counts the request.
@router.get("/customers", response_model=List[Customer], dependencies=[Depends(verify_token)])
@api_limit
def list_customers(request: Request, repo: CustomerRepository = Depends(get_customer_repo)):
    try:
        return repo.list()
    except SQLAlchemyError as e:
        log.error(f"Customer listing failed: {e}", exc_info=True)
        return error_response(e)

# ==============================================================================
# --- PRODUCT ENDPOINTS ---
# ==============================================================================

@router.post("/products", response_model=Product)
@api_limit
def create_product(request: Request, product: Product, repo: ProductRepository = Depends(get_product_repo)):
    try:
        return repo.create(product)
    except SQLAlchemyError as e:
        log.error(f"Product create failed: {e}", exc_info=True)
        return error_response(e)

@router.put("/products", response_model=Product)
@api_limit
def update_product(request: Request, product: ProductUpdate, repo: ProductRepository = Depends(get_product_repo)):
    try:
        return repo.update(product.id, product.model_dump(exclude_unset=True, exclude={"id"}))
    except (SQLAlchemyError, RecordNotFound) as e:
        log.error(f"Product update failed for id {product.id}: {e}", exc_info=True)
        return error_response(e)

@router.delete("/products/{product_id}", response_model=Product)
@api_limit
def delete_product(request: Request, product_id: int = Path(ge=1, le=MAX_ID), repo: ProductRepository = Depends(get_product_repo)):
    try:
        return repo.delete(product_id)
    except (SQLAlchemyError, RecordNotFound) as e:
        log.error(f"Product delete failed for id {product_id}: {e}", exc_info=True)
        return error_response(e)

@router.get("/products/q/{term}", response_model=List[Product])
@api_limit
def search_products(request: Request, term: str, repo: ProductRepository = Depends(get_product_repo)):
    try:
        products = repo.search(term)
    except SQLAlchemyError as e:
        log.error(f"Product search failed for term {term!r}: {e}", exc_info=True)
        return error_response(e)
    if not products:
        return not_found("Product not found!")
    return products

@router.get("/products/{product_id}", response_model=Product)
def get_product(product_id: int = Path(ge=1, le=MAX_ID), repo: ProductRepository = Depends(get_product_repo)):
    try:
        product = repo.get(product_id)
    except SQLAlchemyError as e:
        log.error(f"Product lookup failed for id {product_id}: {e}", exc_info=True)
        return error_response(e)
    if not product:
        return not_found("Product not found!")
    return product

@router.get("/products", response_model=List[Product])
@api_limit
def list_products(request: Request, repo: ProductRepository = Depends(get_product_repo)):
    try:
        return repo.list()
    except SQLAlchemyError as e:
        log.error(f"Product listing failed: {e}", exc_info=True)
        return error_response(e)

# ==============================================================================
# --- USER & AUTH ENDPOINTS ---
# ==============================================================================

@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, repo: UserRepository = Depends(get_user_repo)):
    try:
        user = repo.create(payload.username, make_password(payload.password), email=payload.email)
    except IntegrityError:
        log.warning(f"Registration rejected, username {payload.username!r} already taken")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"message": "Username already taken"},
        )
    except SQLAlchemyError as e:
        log.error(f"User create failed: {e}", exc_info=True)
        return error_response(e)
    log.info(f"Registered user {user.username} (id {user.user_id})")
    return user

@router.post("/login", response_model=Token)
def login(
    credentials: Credentials,
    users: UserRepository = Depends(get_user_repo),
    tokens: TokenRepository = Depends(get_token_repo),
):
    try:
        user = users.get_by_username(credentials.username)
    except SQLAlchemyError as e:
        log.error(f"User lookup failed for {credentials.username!r}: {e}", exc_info=True)
        return error_response(e)
    if user is None or not check_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        token = tokens.issue(user)
    except SQLAlchemyError as e:
        log.error(f"Token issue failed for {user.username}: {e}", exc_info=True)
        return error_response(e)
    log.info(f"User {user.username} logged in")
    return Token(token=token.key)

@router.get("/logout")
def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenRepository = Depends(get_token_repo),
):
    if credentials is not None:
        try:
            tokens.revoke(credentials.credentials)
        except SQLAlchemyError as e:
            log.error(f"Token revoke failed: {e}", exc_info=True)
            return error_response(e)
    return {"message": "Logged out"}
