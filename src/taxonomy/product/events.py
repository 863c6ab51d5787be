"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, String

from taxonomy.domain import taxonomy


@taxonomy.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    title: String(required=True)
    category_id: Identifier()
    subcategory_id: Identifier()


@taxonomy.event(part_of="Product")
class ProductRetagged:
    """A product's category or subcategory reference changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier()
    subcategory_id: Identifier()


@taxonomy.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
