"""Errors raised when a category change would break the hierarchy.

All of them extend protean's own exceptions, so existing handlers that catch
``ValidationError`` or ``ObjectNotFoundError`` keep working. Messages use the
``{"field": ["message"]}`` shape protean uses everywhere else.
"""

from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError


class DeletionReason(Enum):
    """Why a category deletion was not applied."""

    HAS_CHILDREN = "HAS_CHILDREN"
    HAS_PRODUCTS = "HAS_PRODUCTS"
    NOT_FOUND = "NOT_FOUND"


_BLOCKED_MESSAGES = {
    DeletionReason.HAS_CHILDREN: "Cannot delete: this category has active subcategories",
    DeletionReason.HAS_PRODUCTS: "Cannot delete: products are associated with this category",
}


class CategoryNotFoundError(ObjectNotFoundError):
    def __init__(self, category_id):
        self.category_id = str(category_id) if category_id is not None else None
        super().__init__({"category": [f"Category {category_id} not found"]})


class DuplicateSiblingError(ValidationError):
    def __init__(self, name, parent_id):
        self.name = name
        self.parent_id = parent_id
        super().__init__({"name": [f"Category '{name}' already exists at this level"]})


class InvalidParentError(ValidationError):
    def __init__(self, parent_id):
        self.parent_id = parent_id
        super().__init__({"parent_id": [f"Parent category {parent_id} does not exist or is inactive"]})


class SelfParentError(ValidationError):
    def __init__(self, category_id):
        self.category_id = category_id
        super().__init__({"parent_id": ["Category cannot be its own parent"]})


class CycleDetectedError(ValidationError):
    def __init__(self, category_id, parent_id):
        self.category_id = category_id
        self.parent_id = parent_id
        super().__init__({"parent_id": ["Circular hierarchy not allowed"]})


class DeleteBlockedError(ValidationError):
    def __init__(self, category_id, reason: DeletionReason):
        self.category_id = category_id
        self.reason = reason
        super().__init__({"category": [_BLOCKED_MESSAGES[reason]]})
