"""Shared BDD fixtures and step definitions for the taxonomy domain."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then
from taxonomy.category.category import Category
from taxonomy.category.listing import list_categories
from taxonomy.category.management import CreateCategory
from taxonomy.product.product import Product


def _walk(nodes):
    for node in nodes:
        yield node
        yield from _walk(node["children"])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def categories():
    """Category ids by name, filled in by the Given steps."""
    return {}


@pytest.fixture()
def products():
    """Product ids by the category name they tag."""
    return {}


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a category "{name}" at the root'))
def root_category(categories, name):
    categories[name] = current_domain.process(CreateCategory(name=name), asynchronous=False)


@given(parsers.cfparse('a category "{name}" under "{parent}"'))
def child_category(categories, name, parent):
    command = CreateCategory(name=name, parent_id=categories[parent])
    categories[name] = current_domain.process(command, asynchronous=False)


@given(parsers.re(r'(?P<count>\d+) active products? tagging "(?P<name>[^"]+)"'))
def active_products(categories, products, count, name):
    repo = current_domain.repository_for(Product)
    for index in range(int(count)):
        product = Product.create(title=f"{name} product {index}", category_id=categories[name])
        repo.add(product)
        products.setdefault(name, []).append(str(product.id))


@given(parsers.cfparse('the products tagging "{name}" are deactivated'))
def deactivate_products(products, name):
    repo = current_domain.repository_for(Product)
    for product_id in products.get(name, []):
        product = repo.get(product_id)
        product.deactivate()
        repo.add(product)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" is still listed'))
def still_listed(categories, name):
    assert categories[name] in {node["id"] for node in _walk(list_categories())}
    assert current_domain.repository_for(Category).get(categories[name]).is_active is True


@then(parsers.cfparse('"{name}" is not listed'))
def not_listed(categories, name):
    assert categories[name] not in {node["id"] for node in _walk(list_categories())}
    assert categories[name] not in {row["id"] for row in list_categories(flat=True)}
