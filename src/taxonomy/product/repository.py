"""Repository for the Product aggregate."""

from taxonomy.category.repository import fetch_all
from taxonomy.domain import taxonomy
from taxonomy.product.product import Product


@taxonomy.repository(part_of=Product)
class ProductRepository:
    def find_active(self) -> list[Product]:
        return fetch_all(self._dao.query.filter(is_active=True).order_by("id"))

    def references_category(self, category_id) -> bool:
        """Whether any active product tags ``category_id`` as category or subcategory."""
        category_id = str(category_id)
        for field in ("category_id", "subcategory_id"):
            query = self._dao.query.filter(is_active=True, **{field: category_id})
            if query.limit(1).all().items:
                return True
        return False
