# models.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel
from pydantic import Field as SchemaField
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

# Largest key SQLite (and BIGINT columns) can bind
MAX_ID = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite reads timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# --- CUSTOMER ---
class Customer(BaseModel):
    customer_id: Optional[int] = SchemaField(default=None, ge=1, le=MAX_ID)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None

class CustomerUpdate(BaseModel):
    id: int = SchemaField(validation_alias=AliasChoices("id", "customer_id"), ge=1, le=MAX_ID)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None

class CustomerSQL(SQLModel, table=True):
    __tablename__ = "customers"

    customer_id: Optional[int] = Field(default=None, primary_key=True)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = Field(default=None, unique=True)
    phone_number: Optional[str] = None

# --- PRODUCT ---
class Product(BaseModel):
    product_id: Optional[int] = SchemaField(default=None, ge=1, le=MAX_ID)
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

class ProductUpdate(BaseModel):
    id: int = SchemaField(validation_alias=AliasChoices("id", "product_id"), ge=1, le=MAX_ID)
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

class ProductSQL(SQLModel, table=True):
    __tablename__ = "products"

    product_id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image_url: Optional[str] = None

# --- USER ---
class UserCreate(BaseModel):
    username: str
    email: Optional[str] = None
    password: str

class User(BaseModel):
    user_id: int
    username: str
    email: Optional[str] = None
    created_at: datetime

class UserSQL(SQLModel, table=True):
    __tablename__ = "users"

    user_id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: Optional[str] = None
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

# --- AUTH ---
class Credentials(BaseModel):
    username: str
    password: str

class Token(BaseModel):
    token: str
    token_type: str = "bearer"

class AuthTokenSQL(SQLModel, table=True):
    __tablename__ = "auth_tokens"

    key: str = Field(primary_key=True, max_length=40)
    user_id: int = Field(foreign_key="users.user_id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
