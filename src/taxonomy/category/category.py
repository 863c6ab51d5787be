"""Category aggregate root for the product taxonomy."""

import json
from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text

from taxonomy.category.exceptions import SelfParentError
from taxonomy.domain import taxonomy
from taxonomy.utils.text import normalize_name, slug_for


def decode_meta(raw) -> dict:
    if not raw:
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    return json.loads(raw)


def validate_meta(meta) -> dict:
    """Check a meta patch and return it as a plain dict."""
    if meta is None:
        return {}
    if isinstance(meta, str):
        try:
            meta = json.loads(meta)
        except json.JSONDecodeError:
            raise ValidationError({"meta": ["Meta must be valid JSON"]}) from None
    if not isinstance(meta, dict):
        raise ValidationError({"meta": ["Meta must be a JSON object"]})

    sort = meta.get("sort")
    if sort is not None and (isinstance(sort, bool) or not isinstance(sort, int)):
        raise ValidationError({"meta": ["Meta sort must be an integer"]})
    return dict(meta)


@taxonomy.aggregate
class Category:
    """A node in the product taxonomy.

    Categories are stored flat, each pointing at its parent by id; the tree is
    rebuilt on every read. ``meta`` holds display hints such as ``sort`` (order
    among siblings) and ``icon``. Deleting a category only flips ``is_active``.
    """

    name: String(required=True, max_length=100)
    slug: String(max_length=200)
    parent_id: Identifier()
    is_active: Boolean(default=True)
    meta: Text()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @property
    def meta_values(self) -> dict:
        return decode_meta(self.meta)

    @property
    def sort_order(self) -> int:
        return self.meta_values.get("sort") or 0

    @classmethod
    def create(cls, name, parent_id=None, meta=None, slug=None):
        from taxonomy.category.events import CategoryCreated

        name = normalize_name(name)
        if not name:
            raise ValidationError({"name": ["Name is required"]})

        meta = validate_meta(meta)
        meta_json = json.dumps(meta) if meta else None
        now = datetime.now()

        category = cls(
            name=name,
            slug=slug or slug_for(name) or None,
            parent_id=parent_id or None,
            meta=meta_json,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_id=category.parent_id,
                meta=meta_json,
            )
        )
        return category

    def rename(self, name):
        from taxonomy.category.events import CategoryRenamed

        name = normalize_name(name)
        if not name:
            raise ValidationError({"name": ["Name is required"]})
        if name == self.name:
            return

        previous_name = self.name
        self.name = name
        self.updated_at = datetime.now()

        self.raise_(
            CategoryRenamed(
                category_id=self.id,
                previous_name=previous_name,
                name=name,
            )
        )

    def move_to(self, parent_id):
        """Attach the category under ``parent_id``; ``None`` makes it a root.

        Only the self-parent case can be checked here. Cycles through other
        categories need the store and are checked by the hierarchy rules.
        """
        from taxonomy.category.events import CategoryMoved

        parent_id = str(parent_id) if parent_id else None
        if parent_id == str(self.id):
            raise SelfParentError(self.id)

        previous_parent_id = str(self.parent_id) if self.parent_id else None
        if parent_id == previous_parent_id:
            return

        self.parent_id = parent_id
        self.updated_at = datetime.now()

        self.raise_(
            CategoryMoved(
                category_id=self.id,
                previous_parent_id=previous_parent_id,
                parent_id=parent_id,
            )
        )

    def update_meta(self, meta):
        """Shallow-merge ``meta`` into the stored meta; unspecified keys survive."""
        from taxonomy.category.events import CategoryMetaUpdated

        merged = {**self.meta_values, **validate_meta(meta)}
        meta_json = json.dumps(merged) if merged else None

        self.meta = meta_json
        self.updated_at = datetime.now()

        self.raise_(CategoryMetaUpdated(category_id=self.id, meta=meta_json))

    def reorder(self, sort):
        from taxonomy.category.events import CategoryReordered

        validate_meta({"sort": sort})
        previous_sort = self.sort_order

        self.meta = json.dumps({**self.meta_values, "sort": sort})
        self.updated_at = datetime.now()

        self.raise_(
            CategoryReordered(
                category_id=self.id,
                previous_sort=previous_sort,
                sort=sort,
            )
        )

    def deactivate(self):
        from taxonomy.category.events import CategoryDeactivated

        if not self.is_active:
            raise ValidationError({"status": ["Category is already inactive"]})

        self.is_active = False
        now = datetime.now()
        self.updated_at = now

        self.raise_(
            CategoryDeactivated(
                category_id=self.id,
                deactivated_at=now,
            )
        )

    def reactivate(self):
        from taxonomy.category.events import CategoryReactivated

        if self.is_active:
            raise ValidationError({"status": ["Category is already active"]})

        self.is_active = True
        now = datetime.now()
        self.updated_at = now

        self.raise_(
            CategoryReactivated(
                category_id=self.id,
                reactivated_at=now,
            )
        )
