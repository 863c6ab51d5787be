"""Product aggregate, modelled only as far as category references go."""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from taxonomy.domain import taxonomy


@taxonomy.aggregate
class Product:
    """A sellable item tagged with a primary category and an optional subcategory.

    Products are owned elsewhere. The taxonomy only reads their category
    references to count them and to guard category deletion.
    """

    title: String(required=True, max_length=255)
    category_id: Identifier()
    subcategory_id: Identifier()
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, title, category_id=None, subcategory_id=None):
        from taxonomy.product.events import ProductCreated

        product = cls(
            title=title,
            category_id=category_id or None,
            subcategory_id=subcategory_id or None,
            created_at=datetime.now(),
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                title=product.title,
                category_id=product.category_id,
                subcategory_id=product.subcategory_id,
            )
        )
        return product

    def retag(self, category_id=None, subcategory_id=None):
        from taxonomy.product.events import ProductRetagged

        self.category_id = category_id or None
        self.subcategory_id = subcategory_id or None

        self.raise_(
            ProductRetagged(
                product_id=self.id,
                category_id=self.category_id,
                subcategory_id=self.subcategory_id,
            )
        )

    def deactivate(self):
        from taxonomy.product.events import ProductDeactivated

        if not self.is_active:
            raise ValidationError({"status": ["Product is already inactive"]})

        self.is_active = False
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=datetime.now()))
