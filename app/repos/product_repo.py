# app/repos/product_repo.py
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        # populate_existing - zawsze swiezy odczyt, nie obiekt z identity map
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def decrement_stock_if_available(self, product_id: int, quantity: int) -> bool:
        """
        Warunkowe zmniejszenie stanu (compare-and-swap na wierszu produktu).

        UPDATE products SET stock_quantity = stock_quantity - :q
        WHERE id = :id AND stock_quantity >= :q

        0 zmienionych wierszy = ktos inny zabral towar, nic nie zostalo zmienione.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
