"""Category management commands and handlers.

Handlers load what they need from the live store, run every hierarchy rule
first, and only then mutate the aggregate and save it once. A failed rule
therefore leaves the stored category untouched.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from taxonomy.category.category import Category, validate_meta
from taxonomy.category.exceptions import DeleteBlockedError, SelfParentError
from taxonomy.category.hierarchy import (
    ensure_no_cycle,
    ensure_unique_among_siblings,
    ensure_valid_parent,
    find_deletion_blocker,
    load_category,
)
from taxonomy.domain import taxonomy
from taxonomy.utils.text import normalize_name

logger = structlog.get_logger(__name__)


@taxonomy.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    parent_id: Identifier()
    meta: Text()
    slug: String(max_length=200)


@taxonomy.command(part_of="Category")
class UpdateCategory:
    """Rename, reparent, change meta or toggle activity of a category.

    ``parent_id`` moves the category under another parent. ``move_to_root``
    detaches it instead, since an absent ``parent_id`` means "keep the parent".
    """

    category_id: Identifier(required=True)
    name: String(max_length=100)
    parent_id: Identifier()
    move_to_root: Boolean(default=False)
    meta: Text()
    is_active: Boolean()


@taxonomy.command(part_of="Category")
class ReorderCategory:
    category_id: Identifier(required=True)
    sort: Integer(required=True)


@taxonomy.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        name = normalize_name(command.name)
        if not name:
            raise ValidationError({"name": ["Name is required"]})

        parent_id = str(command.parent_id) if command.parent_id else None
        ensure_valid_parent(parent_id)
        ensure_unique_among_siblings(name, parent_id)

        category = Category.create(
            name=name,
            parent_id=parent_id,
            meta=command.meta,
            slug=command.slug,
        )
        current_domain.repository_for(Category).add(category)

        logger.info("Category created", category_id=str(category.id), name=name, parent_id=parent_id)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        category = load_category(command.category_id)
        category_id = str(category.id)
        current_parent_id = str(category.parent_id) if category.parent_id else None

        if command.move_to_root and command.parent_id:
            raise ValidationError({"parent_id": ["Cannot move under a parent and to the root at once"]})
        if command.parent_id and str(command.parent_id) == category_id:
            raise SelfParentError(category_id)

        name = category.name
        if command.name is not None:
            name = normalize_name(command.name)
            if not name:
                raise ValidationError({"name": ["Name is required"]})

        parent_id = current_parent_id
        if command.move_to_root:
            parent_id = None
        elif command.parent_id:
            parent_id = str(command.parent_id)
        parent_changed = parent_id != current_parent_id

        meta = validate_meta(command.meta) if command.meta is not None else None
        deactivating = command.is_active is False and category.is_active
        reactivating = command.is_active is True and not category.is_active

        if parent_changed:
            ensure_no_cycle(category_id, parent_id)
            ensure_valid_parent(parent_id)
        elif reactivating:
            ensure_valid_parent(parent_id)

        stays_active = (category.is_active and not deactivating) or reactivating
        if stays_active and (name != category.name or parent_changed or reactivating):
            ensure_unique_among_siblings(name, parent_id, exclude_id=category_id)

        if deactivating:
            reason = find_deletion_blocker(category_id)
            if reason is not None:
                raise DeleteBlockedError(category_id, reason)

        category.rename(name)
        if parent_changed:
            category.move_to(parent_id)
        if meta is not None:
            category.update_meta(meta)
        if deactivating:
            category.deactivate()
        elif reactivating:
            category.reactivate()

        current_domain.repository_for(Category).add(category)

        if parent_changed:
            logger.info(
                "Category moved",
                category_id=category_id,
                previous_parent_id=current_parent_id,
                parent_id=parent_id,
            )
        return category

    @handle(ReorderCategory)
    def reorder_category(self, command):
        repo = current_domain.repository_for(Category)
        category = load_category(command.category_id)
        category.reorder(command.sort)
        repo.add(category)
