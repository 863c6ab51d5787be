"""Category deletion: a soft delete gated on referential safety.

A deletion request ends in one of three states:

- blocked because the category still has active subcategories (``HAS_CHILDREN``),
- blocked because active products still reference it (``HAS_PRODUCTS``),
- applied: ``is_active`` is set to ``False`` and the row is kept. Deleting a
  category that is already inactive is applied again as a no-op.

Both checks run again on every request, right before the write. A blocked
request changes nothing. There is no undelete here; reactivation goes through
``UpdateCategory`` with ``is_active=True``.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from taxonomy.category.category import Category
from taxonomy.category.exceptions import (
    CategoryNotFoundError,
    DeleteBlockedError,
    DeletionReason,
)
from taxonomy.category.hierarchy import find_deletion_blocker, load_category
from taxonomy.domain import taxonomy

logger = structlog.get_logger(__name__)


@taxonomy.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


@dataclass(frozen=True)
class DeletionOutcome:
    applied: bool
    reason: DeletionReason | None = None

    def to_dict(self) -> dict:
        result = {"applied": self.applied}
        if self.reason is not None:
            result["reason"] = self.reason.value
        return result


@taxonomy.command_handler(part_of=Category)
class DeleteCategoryHandler:
    @handle(DeleteCategory)
    def delete_category(self, command):
        category = load_category(command.category_id)
        category_id = str(category.id)

        # A soft-deleted row is still stored; repeating the delete changes nothing
        if not category.is_active:
            logger.info("Category already inactive", category_id=category_id)
            return category_id

        reason = find_deletion_blocker(category_id)
        if reason is not None:
            logger.info("Category deletion blocked", category_id=category_id, reason=reason.value)
            raise DeleteBlockedError(category_id, reason)

        category.deactivate()
        current_domain.repository_for(Category).add(category)

        logger.info("Category deactivated", category_id=category_id, name=category.name)
        return category_id


def delete_category(category_id) -> DeletionOutcome:
    """Process a deletion request and report how it ended instead of raising."""
    try:
        current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    except DeleteBlockedError as exc:
        return DeletionOutcome(applied=False, reason=exc.reason)
    except CategoryNotFoundError:
        return DeletionOutcome(applied=False, reason=DeletionReason.NOT_FOUND)
    return DeletionOutcome(applied=True)
