"""Category tree building: flat rows in, sorted listings or nested trees out.

Categories are persisted flat with a parent pointer. Every read rebuilds the
structure from the current active set:

1. index every category by id,
2. link each node under its parent, or make it a root,
3. sort every sibling list by ``meta.sort`` then name,
4. when counts are requested, aggregate subtree counts post-order.

A parent reference that does not resolve (missing or inactive parent) turns the
node into a root instead of hiding its subtree. Self-parented nodes and cycles
that slipped past write-time validation are broken the same way. Both cases
are logged, since they mean stored data has drifted.
"""

import unicodedata
from collections.abc import Iterable, Mapping

import structlog

from taxonomy.category.category import Category

logger = structlog.get_logger(__name__)


def _isoformat(value):
    return value.isoformat() if value is not None else None


def project_category(category: Category) -> dict:
    """Plain-dict view of a category, the shape every listing returns."""
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "parent_id": str(category.parent_id) if category.parent_id else None,
        "is_active": category.is_active,
        "meta": category.meta_values,
        "created_at": _isoformat(category.created_at),
        "updated_at": _isoformat(category.updated_at),
    }


def _collation_key(name: str) -> tuple:
    """Approximate locale-aware name order: base letters, then accents, then case (lowercase first)."""
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), name.swapcase())


def category_sort_key(node: dict) -> tuple:
    """Order by ``meta.sort``, then name in collation order, then id."""
    return (node["meta"].get("sort") or 0, *_collation_key(node["name"] or ""), node["id"])


def build_flat(categories: Iterable[Category], counts: Mapping[str, int] | None = None) -> list[dict]:
    nodes = []
    for category in categories:
        node = project_category(category)
        if counts is not None:
            node["counts"] = {"direct": counts.get(node["id"], 0)}
        nodes.append(node)

    nodes.sort(key=category_sort_key)
    return nodes


def build_tree(categories: Iterable[Category], counts: Mapping[str, int] | None = None) -> list[dict]:
    """Nested tree of ``categories``; with ``counts``, every node gets direct and subtree counts."""
    nodes = {}
    for category in categories:
        node = project_category(category)
        node["children"] = []
        if counts is not None:
            node["counts"] = {"direct": counts.get(node["id"], 0), "subtree": 0}
        nodes[node["id"]] = node

    roots = _link(nodes)

    for node in nodes.values():
        node["children"].sort(key=category_sort_key)
    roots.sort(key=category_sort_key)

    if _promote_unreachable(nodes, roots):
        roots.sort(key=category_sort_key)

    if counts is not None:
        _aggregate_subtree_counts(roots)

    return roots


def _link(nodes: dict) -> list[dict]:
    roots = []
    for node_id, node in nodes.items():
        parent_id = node["parent_id"]
        if not parent_id:
            roots.append(node)
        elif parent_id == node_id:
            logger.warning("Self-parented category treated as root", category_id=node_id)
            roots.append(node)
        elif parent_id not in nodes:
            logger.warning(
                "Category parent not found among active categories, treating as root",
                category_id=node_id,
                parent_id=parent_id,
            )
            roots.append(node)
        else:
            nodes[parent_id]["children"].append(node)
    return roots


def _reachable_ids(roots: list[dict]) -> set:
    seen = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node["id"] in seen:
            continue
        seen.add(node["id"])
        stack.extend(node["children"])
    return seen


def _cycle_members(nodes: dict, start: dict) -> list[dict]:
    """Nodes of the parent cycle that ``start`` hangs from (``start`` may be off it)."""
    on_path = set()
    node = start
    while node["id"] not in on_path:
        on_path.add(node["id"])
        node = nodes[node["parent_id"]]

    members = [node]
    member = nodes[node["parent_id"]]
    while member is not node:
        members.append(member)
        member = nodes[member["parent_id"]]
    return members


def _promote_unreachable(nodes: dict, roots: list[dict]) -> bool:
    """Break parent cycles by promoting one member of each to a root.

    Nodes on a cycle, and everything hanging below one, are unreachable from a
    root. For every such cycle the first member in sort order is detached from
    its parent and promoted; the rest of the cycle and all descendants stay
    linked beneath it.
    """
    seen = _reachable_ids(roots)
    if len(seen) == len(nodes):
        return False

    stranded = sorted((node for node_id, node in nodes.items() if node_id not in seen), key=category_sort_key)
    for node in stranded:
        if node["id"] in seen:
            continue

        head = min(_cycle_members(nodes, node), key=category_sort_key)
        parent = nodes[head["parent_id"]]
        parent["children"] = [child for child in parent["children"] if child is not head]
        roots.append(head)
        seen |= _reachable_ids([head])

        logger.warning(
            "Category parent cycle detected, treating as root",
            category_id=head["id"],
            parent_id=head["parent_id"],
        )
    return True


def _aggregate_subtree_counts(roots: list[dict]) -> None:
    """Post-order pass: ``subtree = direct + sum(child subtree)``, children first."""
    stack = [(root, False) for root in reversed(roots)]
    while stack:
        node, children_done = stack.pop()
        if children_done:
            node["counts"]["subtree"] = node["counts"]["direct"] + sum(
                child["counts"]["subtree"] for child in node["children"]
            )
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in node["children"])
