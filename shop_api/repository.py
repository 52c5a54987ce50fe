# repository.py
import secrets
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel
from sqlmodel import Session, SQLModel, col, or_, select

from shop_api.models import CustomerSQL, ProductSQL, UserSQL, AuthTokenSQL, as_utc, utcnow


class RecordNotFound(ValueError):
    """Raised when an update or delete targets a key that does not exist."""

# ==============================================================================
# --- REPOSITORY INTERFACES ---
# ==============================================================================

class BaseEntityRepository(ABC):
    @abstractmethod
    def create(self, record: BaseModel) -> SQLModel:
        pass

    @abstractmethod
    def get(self, key: int) -> Optional[SQLModel]:
        pass

    @abstractmethod
    def update(self, key: int, changes: Dict[str, Any]) -> SQLModel:
        pass

    @abstractmethod
    def delete(self, key: int) -> Dict[str, Any]:
        pass

    @abstractmethod
    def list(self) -> List[SQLModel]:
        pass

    @abstractmethod
    def search(self, term: str) -> List[SQLModel]:
        pass

# ==============================================================================
# --- SQLMODEL REPOSITORIES ---
# ==============================================================================

class SQLModelEntityRepository(BaseEntityRepository):
    """
    One table, one injected session. Each method is a single statement
    followed by a commit where it writes.

    Subclasses set `model` (the table class) and `search_fields` (the
    columns `search` matches against with OR semantics).
    """
    model: Type[SQLModel]
    search_fields: Sequence[str] = ()

    def __init__(self, session: Session):
        self.session = session

    def _get_or_raise(self, key: int) -> SQLModel:
        row = self.session.get(self.model, key)
        if row is None:
            raise RecordNotFound(f"{self.model.__tablename__} record {key} not found")
        return row

    def create(self, record: BaseModel) -> SQLModel:
        row = self.model(**record.model_dump(exclude_unset=True))
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def get(self, key: int) -> Optional[SQLModel]:
        return self.session.get(self.model, key)

    def update(self, key: int, changes: Dict[str, Any]) -> SQLModel:
        row = self._get_or_raise(key)
        for field, value in changes.items():
            setattr(row, field, value)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return row

    def delete(self, key: int) -> Dict[str, Any]:
        row = self._get_or_raise(key)
        # attributes expire on commit and a deleted row cannot be reloaded
        removed = row.model_dump()
        self.session.delete(row)
        self.session.commit()
        return removed

    def list(self) -> List[SQLModel]:
        return list(self.session.exec(select(self.model)).all())

    def search(self, term: str) -> List[SQLModel]:
        clauses = [
            col(getattr(self.model, field)).contains(term, autoescape=True)
            for field in self.search_fields
        ]
        statement = select(self.model).where(or_(*clauses))
        return list(self.session.exec(statement).all())


class CustomerRepository(SQLModelEntityRepository):
    model = CustomerSQL
    search_fields = ("first_name", "email")


class ProductRepository(SQLModelEntityRepository):
    model = ProductSQL
    search_fields = ("name", "category")

# ==============================================================================
# --- USER & TOKEN REPOSITORIES ---
# ==============================================================================

class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, username: str, password_hash: str, email: Optional[str] = None) -> UserSQL:
        user = UserSQL(username=username, email=email, password_hash=password_hash)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get(self, user_id: int) -> Optional[UserSQL]:
        return self.session.get(UserSQL, user_id)

    def get_by_username(self, username: str) -> Optional[UserSQL]:
        statement = select(UserSQL).where(UserSQL.username == username)
        return self.session.exec(statement).first()


class TokenRepository:
    def __init__(self, session: Session):
        self.session = session

    def issue(self, user: UserSQL) -> AuthTokenSQL:
        token = AuthTokenSQL(key=secrets.token_hex(20), user_id=user.user_id)
        self.session.add(token)
        self.session.commit()
        self.session.refresh(token)
        return token

    def authenticate(self, key: str, ttl: timedelta) -> Optional[UserSQL]:
        """Return the token's user, or None if the key is unknown or older than `ttl`."""
        token = self.session.get(AuthTokenSQL, key)
        if token is None:
            return None
        if as_utc(token.created_at) + ttl < utcnow():
            return None
        return UserRepository(self.session).get(token.user_id)

    def revoke(self, key: str) -> bool:
        token = self.session.get(AuthTokenSQL, key)
        if token is None:
            return False
        self.session.delete(token)
        self.session.commit()
        return True
