"""BDD tests for subtree counts, gated deletion and hierarchy validation."""

from protean.utils.globals import current_domain
from pytest_bdd import parsers, scenarios, then, when
from taxonomy.category.category import Category
from taxonomy.category.deletion import delete_category
from taxonomy.category.exceptions import CycleDetectedError, DuplicateSiblingError
from taxonomy.category.listing import list_categories
from taxonomy.category.management import CreateCategory, UpdateCategory

scenarios("features/category_hierarchy.feature")


def walk(nodes):
    for node in nodes:
        yield node
        yield from walk(node["children"])


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the category tree is built with counts", target_fixture="tree")
def build_tree_with_counts():
    return list_categories(with_counts=True)


@when(parsers.cfparse('"{name}" is deleted'), target_fixture="outcome")
def delete(categories, name):
    return delete_category(categories[name])


@when(parsers.cfparse('"{name}" is moved under "{parent}"'))
def move(categories, error, name, parent):
    command = UpdateCategory(category_id=categories[name], parent_id=categories[parent])
    try:
        current_domain.process(command, asynchronous=False)
    except CycleDetectedError as exc:
        error["exc"] = exc


@when(parsers.cfparse('a category "{name}" is created under "{parent}"'))
def create_under(categories, error, name, parent):
    command = CreateCategory(name=name, parent_id=categories[parent])
    try:
        current_domain.process(command, asynchronous=False)
    except DuplicateSiblingError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {direct:d} direct and {subtree:d} subtree products'))
def node_counts(tree, categories, name, direct, subtree):
    node = next(node for node in walk(tree) if node["id"] == categories[name])
    assert node["counts"] == {"direct": direct, "subtree": subtree}


@then(parsers.cfparse('the deletion is blocked because of "{reason}"'))
def deletion_blocked(outcome, reason):
    assert outcome.applied is False
    assert outcome.reason.value == reason


@then("the deletion is applied")
def deletion_applied(outcome):
    assert outcome.applied is True
    assert outcome.reason is None


@then("the action fails with a cycle error")
def fails_with_cycle(error):
    assert isinstance(error["exc"], CycleDetectedError)


@then("the action fails with a duplicate sibling error")
def fails_with_duplicate(error):
    assert isinstance(error["exc"], DuplicateSiblingError)


@then(parsers.cfparse('"{name}" is a root'))
def is_root(categories, name):
    assert current_domain.repository_for(Category).get(categories[name]).parent_id is None
