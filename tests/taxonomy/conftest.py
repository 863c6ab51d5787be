import os

import pytest


@pytest.fixture(scope="session")
def _taxonomy_domain(request):
    """Initialize the taxonomy domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from taxonomy.domain import taxonomy

    taxonomy.init()
    return taxonomy


@pytest.fixture(scope="session", autouse=True)
def setup_db(_taxonomy_domain):
    from taxonomy.utils.db import drop_db, setup_db

    setup_db(_taxonomy_domain)

    yield

    drop_db(_taxonomy_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_taxonomy_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _taxonomy_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def create_category():
    """Create a category through the command handler and return its id."""
    from protean.utils.globals import current_domain
    from taxonomy.category.management import CreateCategory

    def _create(name, parent_id=None, **kwargs):
        command = CreateCategory(name=name, parent_id=parent_id, **kwargs)
        return current_domain.process(command, asynchronous=False)

    return _create


@pytest.fixture()
def add_product():
    """Persist an active product tagging the given category ids and return it."""
    from protean.utils.globals import current_domain
    from taxonomy.product.product import Product

    def _add(category_id=None, subcategory_id=None, title="Product", active=True):
        product = Product.create(title=title, category_id=category_id, subcategory_id=subcategory_id)
        if not active:
            product.deactivate()
        current_domain.repository_for(Product).add(product)
        return product

    return _add
