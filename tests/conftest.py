"""
Pytest fixtures for the store backend.

Every test gets its own in-memory SQLite database. API tests go through the
FastAPI TestClient with ``get_db`` pointed at the same database, so rows
created through ``db_session`` are visible to requests and vice versa.
"""

from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, hash_password
from app.db.database import Base, create_db_engine, get_db
from app.main import app
from app.models import Product, Profile, UserRole
from app.services.inventory import status_for_quantity

PASSWORD = "secret123"

_sequence = count(1)


@pytest.fixture()
def engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_profile(db_session):
    def factory(role: UserRole = UserRole.SALESMAN, username: str | None = None) -> Profile:
        username = username or f"{role.value}{next(_sequence)}"
        profile = Profile(
            username=username,
            email=f"{username}@store.test",
            full_name=username.title(),
            password_hash=hash_password(PASSWORD),
            role=role,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return factory


@pytest.fixture()
def founder(make_profile):
    return make_profile(UserRole.FOUNDER, "founder")


@pytest.fixture()
def salesman(make_profile):
    return make_profile(UserRole.SALESMAN, "salesman")


@pytest.fixture()
def accountant(make_profile):
    return make_profile(UserRole.ACCOUNTING, "accounts")


def auth_headers(profile: Profile) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(profile.id, profile.role)}"}


@pytest.fixture()
def headers_for():
    return auth_headers


@pytest.fixture()
def founder_headers(founder):
    return auth_headers(founder)


@pytest.fixture()
def salesman_headers(salesman):
    return auth_headers(salesman)


@pytest.fixture()
def accountant_headers(accountant):
    return auth_headers(accountant)


@pytest.fixture()
def make_product(db_session):
    def factory(sku: str | None = None, quantity: int = 1, price: str = "1000", cost: str = "600", **overrides) -> Product:
        product = Product(
            sku=sku or f"S-{next(_sequence):08d}",
            saree_name=overrides.pop("saree_name", "Kanjivaram Silk"),
            saree_type=overrides.pop("saree_type", "Silk"),
            material=overrides.pop("material", "Pure Silk"),
            color=overrides.pop("color", "Maroon"),
            vendor_name=overrides.pop("vendor_name", "Sri Lakshmi Textiles"),
            cost_price=Decimal(cost),
            selling_price_a=Decimal(price),
            selling_price_b=Decimal(overrides.pop("price_b", price)),
            selling_price_c=Decimal(overrides.pop("price_c", price)),
            quantity=quantity,
            status=status_for_quantity(quantity),
            **overrides,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return factory
