"""Tests for the document and query commands, run against an in-memory store."""

import json

from tests.cli.conftest import invoke


def create(runner, entity, entity_id, doc):
    result = invoke(
        runner, ["create", entity, "--id", entity_id, "--doc", json.dumps(doc)], json_output=True
    )
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCreate:
    def test_create_prints_stamped_document(self, runner, cli_db):
        created = create(runner, "customer", "c1", {"name": "Alice"})
        assert created["id"] == "c1"
        assert created["entityName"] == "customer"
        assert created["createdAt"] == created["updatedAt"]

    def test_create_from_file(self, runner, cli_db, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text('{"name": "Bob"}')
        result = invoke(runner, ["create", "customer", "--file", str(path)])
        assert result.exit_code == 0
        assert "name: Bob" in result.stdout
        assert len(cli_db.containers["customers"].docs) == 1

    def test_doc_and_file_are_exclusive(self, runner, cli_db):
        result = invoke(runner, ["create", "customer", "--doc", "{}", "--file", "x.json"])
        assert result.exit_code == 2
        assert "Exactly one of --doc or --file" in result.output

    def test_doc_must_be_object(self, runner, cli_db):
        result = invoke(runner, ["create", "customer", "--doc", "[1, 2]"])
        assert result.exit_code == 2

    def test_unknown_entity_is_usage_error(self, runner, cli_db):
        result = invoke(runner, ["create", "widget", "--doc", "{}"])
        assert result.exit_code == 2
        assert "widget" in result.output

    def test_auto_register(self, runner, cli_db):
        result = invoke(runner, ["--auto-register", "create", "widget", "--doc", "{}"])
        assert result.exit_code == 0
        assert "widget" in cli_db.containers
        assert cli_db.opened[-1].auto_register_entities is True

    def test_driver_error_is_general_error(self, runner, cli_db):
        create(runner, "customer", "c1", {})
        result = invoke(runner, ["create", "customer", "--id", "c1", "--doc", "{}"])
        assert result.exit_code == 1


class TestGet:
    def test_get(self, runner, cli_db):
        create(runner, "customer", "c1", {"name": "Alice"})
        result = invoke(runner, ["get", "customer", "c1"], json_output=True)
        assert result.exit_code == 0
        assert json.loads(result.stdout)["name"] == "Alice"

    def test_get_with_partition_key(self, runner, cli_db):
        create(runner, "order", "o1", {"tenantId": "t1"})
        result = invoke(runner, ["get", "order", "o1", "--pk", "t1"])
        assert result.exit_code == 0
        assert "tenantId: t1" in result.stdout

    def test_get_missing(self, runner, cli_db):
        result = invoke(runner, ["get", "customer", "nope"])
        assert result.exit_code == 3
        assert "not found" in result.output


class TestReplace:
    def test_replace(self, runner, cli_db):
        create(runner, "customer", "c1", {"name": "Alice"})
        result = invoke(
            runner, ["replace", "customer", "c1", "--doc", '{"name": "Alicia"}'], json_output=True
        )
        assert result.exit_code == 0
        replaced = json.loads(result.stdout)
        assert replaced["name"] == "Alicia"
        assert "createdAt" not in replaced

    def test_replace_missing(self, runner, cli_db):
        result = invoke(runner, ["replace", "customer", "nope", "--doc", "{}"])
        assert result.exit_code == 3


class TestDelete:
    def test_delete(self, runner, cli_db):
        create(runner, "customer", "c1", {})
        result = invoke(runner, ["delete", "customer", "c1"])
        assert result.exit_code == 0
        assert "Deleted customer 'c1'" in result.stdout
        assert cli_db.containers["customers"].docs == {}

    def test_delete_missing(self, runner, cli_db):
        create(runner, "customer", "c1", {})
        result = invoke(runner, ["delete", "customer", "nope"])
        assert result.exit_code == 3

    def test_delete_partitioned_requires_pk(self, runner, cli_db):
        create(runner, "order", "o1", {"tenantId": "t1"})
        result = invoke(runner, ["delete", "order", "o1"])
        assert result.exit_code == 2
        assert "partition_key" in result.output

        result = invoke(runner, ["delete", "order", "o1", "--pk", "t1"])
        assert result.exit_code == 0


class TestReadMap:
    def test_read_map_json(self, runner, cli_db):
        create(runner, "order", "o1", {"tenantId": "t1"})
        create(runner, "order", "o2", {"tenantId": "t1"})
        args = ["read-map", "order", "o1", "o2", "o3", "--pk", "t1"]
        result = invoke(runner, args, json_output=True)
        assert result.exit_code == 0
        assert set(json.loads(result.stdout)) == {"o1", "o2"}

    def test_read_map_reports_missing(self, runner, cli_db):
        create(runner, "order", "o1", {"tenantId": "t1"})
        result = invoke(runner, ["read-map", "order", "o1", "o9", "--pk", "t1"])
        assert result.exit_code == 0
        assert "Not found: o9" in result.output


class TestQuery:
    def test_query_json_page(self, runner, cli_db):
        for i in range(3):
            create(runner, "customer", f"c{i}", {"n": i})

        result = invoke(runner, ["query", "customer", "--limit", "2"], json_output=True)

        assert result.exit_code == 0
        page = json.loads(result.stdout)
        assert [d["id"] for d in page["items"]] == ["c0", "c1"]
        assert page["continuationToken"] == "2"

    def test_query_continuation(self, runner, cli_db):
        for i in range(3):
            create(runner, "customer", f"c{i}", {"n": i})
        args = ["query", "customer", "--limit", "2", "--continuation", "2"]
        result = invoke(runner, args, json_output=True)
        assert [d["id"] for d in json.loads(result.stdout)["items"]] == ["c2"]

    def test_query_sends_compiled_filter(self, runner, cli_db):
        create(runner, "customer", "c1", {"status": "active"})
        result = invoke(runner, ["query", "customer", "-w", 'status eq "active"'])
        assert result.exit_code == 0
        sent = cli_db.containers["customers"].queries[-1]
        assert sent["query"] == "SELECT * FROM c WHERE c.status = @p0"

    def test_query_bad_limit(self, runner, cli_db):
        result = invoke(runner, ["query", "customer", "--limit", "0"])
        assert result.exit_code == 2

    def test_count(self, runner, cli_db):
        for i in range(4):
            create(runner, "customer", f"c{i}", {})
        result = invoke(runner, ["count", "customer"], json_output=True)
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"count": 4}
