"""Integration tests for the management CLI."""

import json

import manage
import pytest
from taxonomy.utils.db import SQL_PROVIDERS


@pytest.fixture()
def initialized_domain(monkeypatch, _taxonomy_domain):
    monkeypatch.setattr(manage, "_domain", lambda: _taxonomy_domain)
    return _taxonomy_domain


class TestShowTree:
    def test_prints_tree_with_counts(self, initialized_domain, create_category, add_product, capsys):
        parent = create_category("Electronics")
        phones = create_category("Phones", parent_id=parent)
        add_product(category_id=phones)

        manage.main(["show-tree", "--with-counts"])

        tree = json.loads(capsys.readouterr().out)
        assert tree[0]["name"] == "Electronics"
        assert tree[0]["counts"] == {"direct": 0, "subtree": 1}
        assert tree[0]["children"][0]["name"] == "Phones"

    def test_prints_flat_listing(self, initialized_domain, create_category, capsys):
        create_category("Garden")
        create_category("Books")

        manage.main(["show-tree", "--flat"])

        flat = json.loads(capsys.readouterr().out)
        assert [row["name"] for row in flat] == ["Books", "Garden"]
        assert "counts" not in flat[0]


class TestSchemaCommands:
    def test_setup_and_drop_with_memory_provider(self, initialized_domain, capsys):
        providers = [provider.conn_info["provider"] for provider in initialized_domain.providers.values()]
        if any(name in SQL_PROVIDERS for name in providers):
            pytest.skip("would drop the schema the rest of the session runs against")

        manage.main(["setup-db"])
        manage.main(["drop-db"])

        out = capsys.readouterr().out
        assert "Creating taxonomy database schema" in out
        assert "Dropping taxonomy database schema" in out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            manage.main([])
