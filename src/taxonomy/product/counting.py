"""Direct product counts per category reference.

A product adds one to the count of its ``category_id`` and one to the count of
its ``subcategory_id``. Turning direct counts into subtree counts is the tree
builder's job, not this module's.
"""

from collections import Counter
from collections.abc import Iterable

import structlog
from protean.utils.globals import current_domain

from taxonomy.product.product import Product

logger = structlog.get_logger(__name__)


def count_active_by_category_ref(category_ids: Iterable[str] | None = None) -> dict[str, int]:
    """Map category id to the number of active products referencing it.

    When ``category_ids`` is given, ids outside it are left out of the result.
    """
    products = current_domain.repository_for(Product).find_active()

    counts = Counter()
    for product in products:
        for ref in (product.category_id, product.subcategory_id):
            if ref:
                counts[str(ref)] += 1

    if category_ids is not None:
        wanted = {str(category_id) for category_id in category_ids}
        counts = Counter({ref: count for ref, count in counts.items() if ref in wanted})

    logger.debug("Counted product references", product_count=len(products), category_count=len(counts))
    return dict(counts)


def is_referenced_by_active_product(category_id) -> bool:
    return current_domain.repository_for(Product).references_category(category_id)
