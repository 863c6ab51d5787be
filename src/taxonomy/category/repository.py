"""Repository for the Category aggregate."""

from protean.exceptions import ObjectNotFoundError

from taxonomy.category.category import Category
from taxonomy.domain import taxonomy

PAGE_SIZE = 500


def fetch_all(query, page_size: int = PAGE_SIZE) -> list:
    """Page through ``query`` until exhausted, so no store-side limit truncates the result."""
    items = []
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all().items
        items.extend(page)
        if len(page) < page_size:
            return items
        offset += page_size


@taxonomy.repository(part_of=Category)
class CategoryRepository:
    """Live queries over stored categories.

    Every call goes to the store; nothing is cached between calls, so write
    validation always sees the current state.
    """

    def find_by_id(self, category_id) -> Category | None:
        """Point lookup that includes inactive categories. ``None`` when missing."""
        if not category_id:
            return None
        try:
            return self.get(str(category_id))
        except ObjectNotFoundError:
            return None

    def find_active(self) -> list[Category]:
        return fetch_all(self._dao.query.filter(is_active=True).order_by("id"))

    def find_children(self, parent_id) -> list[Category]:
        """Active categories whose parent is ``parent_id``; roots when it is ``None``."""
        if not parent_id:
            return [category for category in self.find_active() if not category.parent_id]
        return fetch_all(self._dao.query.filter(is_active=True, parent_id=str(parent_id)).order_by("id"))

    def has_active_children(self, parent_id) -> bool:
        return bool(self._dao.query.filter(is_active=True, parent_id=str(parent_id)).limit(1).all().items)
