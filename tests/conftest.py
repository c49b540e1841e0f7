# tests/conftest.py
import os

# przed importem app.* - settings czytaja env przy imporcie
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.data.database import Base, build_engine, get_session_factory
from app.data import models  # noqa: F401
from app.data.models import ProductModel, CustomerModel, OrderModel, OrderItemModel
from app.api.dependencies import get_cart_registry
from app.main import create_app
from app.services.cart_service import CartRegistry
from app.services.order_service import OrderService


@pytest.fixture
def engine(tmp_path):
    # plik, nie :memory: - testy wspolbieznosci potrzebuja osobnych polaczen
    engine = build_engine(f"sqlite:///{tmp_path / 'store.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def customer(session_factory):
    with session_factory() as s:
        c = CustomerModel(name="Jan Kowalski", email="jan@example.com")
        s.add(c)
        s.commit()
        return c.id


@pytest.fixture
def make_product(session_factory):
    def _make(name: str, price: str, stock: int) -> int:
        with session_factory() as s:
            p = ProductModel(name=name, price=Decimal(price), stock_quantity=stock)
            s.add(p)
            s.commit()
            return p.id

    return _make


@pytest.fixture
def stock_of(session_factory):
    def _stock(product_id: int) -> int:
        with session_factory() as s:
            return s.get(ProductModel, product_id).stock_quantity

    return _stock


@pytest.fixture
def set_stock(session_factory):
    def _set(product_id: int, stock: int) -> None:
        with session_factory() as s:
            s.get(ProductModel, product_id).stock_quantity = stock
            s.commit()

    return _set


@pytest.fixture
def counts(session_factory):
    def _counts():
        with session_factory() as s:
            return s.query(OrderModel).count(), s.query(OrderItemModel).count()

    return _counts


@pytest.fixture
def order_service(session_factory):
    return OrderService(session_factory)


@pytest.fixture
def registry():
    return CartRegistry()


@pytest.fixture
def client(session_factory, registry):
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cart_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
