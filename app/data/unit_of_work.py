# app/data/unit_of_work.py
from sqlalchemy.orm import sessionmaker

from app.repos.customer_repo import CustomerRepo
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo


class UnitOfWork:
    """
    Jedna sesja = jedna transakcja, otwierana i zamykana w obrebie wywolania.

    with UnitOfWork(SessionLocal) as uow:
        ...
        uow.commit()

    Wyjscie z bloku bez commit (albo przez wyjatek) = rollback wszystkiego.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.session = None

    def __enter__(self):
        self.session = self.session_factory()
        self.products = ProductRepo(self.session)
        self.orders = OrderRepo(self.session)
        self.customers = CustomerRepo(self.session)
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self.rollback()
        finally:
            self.session.close()
            self.session = None
        return False

    def commit(self):
        self.session.commit()

    def rollback(self):
        # po commit rollback nic nie robi
        self.session.rollback()
