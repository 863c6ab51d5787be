"""Domain events for the Category aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from taxonomy.domain import taxonomy


@taxonomy.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the hierarchy, as a root or under a parent."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String()
    parent_id: Identifier()
    meta: Text()


@taxonomy.event(part_of="Category")
class CategoryRenamed:
    __version__ = 1

    category_id: Identifier(required=True)
    previous_name: String(required=True)
    name: String(required=True)


@taxonomy.event(part_of="Category")
class CategoryMoved:
    """A category was attached to a different parent, or detached to the root."""

    __version__ = 1

    category_id: Identifier(required=True)
    previous_parent_id: Identifier()
    parent_id: Identifier()


@taxonomy.event(part_of="Category")
class CategoryMetaUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    meta: Text()


@taxonomy.event(part_of="Category")
class CategoryReordered:
    """A category's position among its siblings was changed."""

    __version__ = 1

    category_id: Identifier(required=True)
    previous_sort: Integer(required=True)
    sort: Integer(required=True)


@taxonomy.event(part_of="Category")
class CategoryDeactivated:
    """A category was soft-deleted and hidden from every listing."""

    __version__ = 1

    category_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@taxonomy.event(part_of="Category")
class CategoryReactivated:
    __version__ = 1

    category_id: Identifier(required=True)
    reactivated_at: DateTime(required=True)
