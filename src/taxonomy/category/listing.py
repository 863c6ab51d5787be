"""Read side of the taxonomy: category listings rebuilt from the live store.

Nothing here is cached. Every call fetches the active categories again and,
when counts are requested, recounts product references.
"""

import structlog
from protean.utils.globals import current_domain

from taxonomy.category.category import Category
from taxonomy.category.tree import build_flat, build_tree, category_sort_key, project_category
from taxonomy.product.counting import count_active_by_category_ref

logger = structlog.get_logger(__name__)


def list_categories(flat: bool = False, with_counts: bool = False) -> list[dict]:
    """Active categories as a flat sorted list or as a nested tree.

    ``with_counts`` adds ``counts.direct`` to flat rows, and both
    ``counts.direct`` and ``counts.subtree`` to tree nodes.
    """
    categories = current_domain.repository_for(Category).find_active()
    counts = None
    if with_counts:
        counts = count_active_by_category_ref(str(category.id) for category in categories)

    logger.debug("Listing categories", flat=flat, with_counts=with_counts, category_count=len(categories))

    if flat:
        return build_flat(categories, counts)
    return build_tree(categories, counts)


def list_children(parent_id=None) -> list[dict]:
    """Active direct children of ``parent_id``, or the roots when it is ``None``."""
    children = current_domain.repository_for(Category).find_children(parent_id)
    return sorted((project_category(child) for child in children), key=category_sort_key)
