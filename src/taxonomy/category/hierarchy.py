"""Structural rules checked before any category change is saved.

Every check reads the live store at call time. Results are never cached:
handlers call these immediately before they persist, which keeps the window
for concurrent writers as narrow as the store allows.
"""

from protean.utils.globals import current_domain

from taxonomy.category.category import Category
from taxonomy.category.exceptions import (
    CategoryNotFoundError,
    CycleDetectedError,
    DeletionReason,
    DuplicateSiblingError,
    InvalidParentError,
    SelfParentError,
)
from taxonomy.product.counting import is_referenced_by_active_product
from taxonomy.utils.text import normalize_name


def _categories():
    return current_domain.repository_for(Category)


def load_category(category_id) -> Category:
    category = _categories().find_by_id(category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


def ensure_valid_parent(parent_id) -> Category | None:
    """A parent must be ``None`` (root) or an active category."""
    if not parent_id:
        return None

    parent = _categories().find_by_id(parent_id)
    if parent is None or not parent.is_active:
        raise InvalidParentError(parent_id)
    return parent


def ensure_unique_among_siblings(name, parent_id, exclude_id=None) -> None:
    """No two active siblings share a name.

    Names are compared after trimming and case-sensitively, so "Phones" and
    "phones" may coexist under the same parent.
    """
    name = normalize_name(name)
    exclude_id = str(exclude_id) if exclude_id else None

    for sibling in _categories().find_children(parent_id):
        if str(sibling.id) != exclude_id and normalize_name(sibling.name) == name:
            raise DuplicateSiblingError(name, parent_id)


def ensure_no_cycle(category_id, new_parent_id) -> None:
    """Walk up from ``new_parent_id``; ``category_id`` must not be on the way to the root.

    Each ancestor is fetched from the store, not from a prebuilt tree. A walk
    that revisits a node means the stored chain is already cyclic, which is
    rejected as well.
    """
    if not new_parent_id:
        return

    category_id = str(category_id)
    if str(new_parent_id) == category_id:
        raise SelfParentError(category_id)

    repo = _categories()
    visited = set()
    ancestor = repo.find_by_id(new_parent_id)
    while ancestor is not None:
        ancestor_id = str(ancestor.id)
        if ancestor_id == category_id or ancestor_id in visited:
            raise CycleDetectedError(category_id, new_parent_id)
        visited.add(ancestor_id)
        ancestor = repo.find_by_id(ancestor.parent_id) if ancestor.parent_id else None


def find_deletion_blocker(category_id) -> DeletionReason | None:
    """First reason the category cannot be deleted right now, if any.

    Active children are checked before product references, so a category with
    both reports ``HAS_CHILDREN``.
    """
    if _categories().has_active_children(category_id):
        return DeletionReason.HAS_CHILDREN
    if is_referenced_by_active_product(category_id):
        return DeletionReason.HAS_PRODUCTS
    return None
