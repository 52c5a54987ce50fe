from datetime import timedelta, timezone

import pytest

from shop_api.models import AuthTokenSQL, Customer, Product, as_utc
from shop_api.repository import (
    CustomerRepository,
    ProductRepository,
    RecordNotFound,
    TokenRepository,
    UserRepository,
)


# ---- ENTITY REPOSITORIES ----
def test_create_assigns_key(session):
    repo = CustomerRepository(session)
    first = repo.create(Customer(first_name="One"))
    second = repo.create(Customer(first_name="Two"))
    assert first.customer_id is not None
    assert second.customer_id != first.customer_id
    assert repo.get(first.customer_id).first_name == "One"


def test_update_only_touches_supplied_fields(session):
    repo = ProductRepository(session)
    product = repo.create(Product(name="Soap", category="Household"))

    updated = repo.update(product.product_id, {"category": "Bath"})
    assert updated.product_id == product.product_id
    assert updated.name == "Soap"
    assert updated.category == "Bath"


def test_update_missing_key_raises(session):
    with pytest.raises(RecordNotFound):
        CustomerRepository(session).update(123, {"first_name": "Nobody"})


def test_delete_returns_removed_fields(session):
    repo = CustomerRepository(session)
    customer = repo.create(Customer(first_name="Gone", email="gone@example.com"))

    removed = repo.delete(customer.customer_id)
    assert removed["email"] == "gone@example.com"
    assert repo.get(customer.customer_id) is None

    with pytest.raises(RecordNotFound):
        repo.delete(customer.customer_id)


def test_search_is_or_over_designated_fields(session):
    repo = ProductRepository(session)
    repo.create(Product(name="Tea Pot", category="Kitchen"))
    repo.create(Product(name="Kettle", category="Tea"))
    # description is not searched
    repo.create(Product(name="Mug", category="Kitchen", description="good for tea"))

    assert sorted(p.name for p in repo.search("Tea")) == ["Kettle", "Tea Pot"]
    assert repo.search("Blender") == []


def test_search_escapes_like_wildcards(session):
    repo = CustomerRepository(session)
    repo.create(Customer(first_name="Ann", email="ann@example.com"))
    repo.create(Customer(first_name="100%", email="pct@example.com"))

    assert [c.first_name for c in repo.search("%")] == ["100%"]
    assert repo.search("_") == []


# ---- USERS & TOKENS ----
def test_token_lifecycle(session):
    user = UserRepository(session).create("somsri", "hash")
    tokens = TokenRepository(session)

    token = tokens.issue(user)
    assert tokens.authenticate(token.key, timedelta(minutes=5)).user_id == user.user_id
    assert tokens.authenticate(token.key, timedelta(minutes=-1)) is None

    assert tokens.revoke(token.key) is True
    assert tokens.revoke(token.key) is False
    assert tokens.authenticate(token.key, timedelta(minutes=5)) is None


def test_get_by_username(session):
    users = UserRepository(session)
    users.create("somsri", "hash", email="s@example.com")

    assert users.get_by_username("somsri").email == "s@example.com"
    assert users.get_by_username("nobody") is None


def test_token_created_at_reads_back_as_utc(session):
    user = UserRepository(session).create("somchai", "hash")
    token = TokenRepository(session).issue(user)

    session.expire_all()
    stored = session.get(AuthTokenSQL, token.key)
    assert as_utc(stored.created_at).tzinfo == timezone.utc
    assert TokenRepository(session).authenticate(token.key, timedelta(minutes=1)).username == "somchai"
