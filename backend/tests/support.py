"""Shared fixtures for the unittest-style test cases: in-memory database, factories, API client."""
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from voicepos.core.rate_limiter import rate_limiter
from voicepos.core.security import create_access_token, get_password_hash
from voicepos.db.base import Base
from voicepos.models import InvoiceCounter, Product, Sale, SaleItem, User  # noqa: F401 - register models
from voicepos.models.user import ROLE_ADMIN


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_user(db, email="owner@cornershop.com", role=ROLE_ADMIN, password="secret123"):
    user = User(email=email, hashed_password=get_password_hash(password), name="Owner", role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, owner, name="milk", price="10.00", stock=5, low_stock_threshold=5, **extra):
    product = Product(
        owner_id=owner.id,
        name=name,
        price=Decimal(price),
        stock=stock,
        low_stock_threshold=low_stock_threshold,
        **extra,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}


class DatabaseTestCase:
    """Mixin: fresh in-memory database per test, exposed as self.db."""

    def setUp(self):
        self.engine, self.Session = make_session_factory()
        self.db = self.Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()


class ApiTestCase(DatabaseTestCase):
    """Mixin: DatabaseTestCase plus a TestClient wired to the same database."""

    def setUp(self):
        super().setUp()
        from voicepos.api.deps import get_db
        from voicepos.main import app

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        self.app = app
        app.dependency_overrides[get_db] = override_get_db
        rate_limiter.reset()
        # TrustedHostMiddleware only lets configured hosts through
        self.client = TestClient(app, base_url="http://localhost")

    def tearDown(self):
        self.app.dependency_overrides.clear()
        super().tearDown()
