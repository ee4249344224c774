"""
Unit tests for the command line interface.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import yaml

from datamigrations.cli import build_parser, main
from datamigrations.store import MigrationStore


@pytest.fixture(autouse=True)
def restore_logger():
    """main() installs handlers bound to the captured stderr."""
    logger = logging.getLogger("datamigrations")
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture
def memory_config(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.dump({"datamigrations": {"backend": "memory"}}))
    return str(config_file)


@pytest.fixture
def patched_store(store):
    with patch.object(MigrationStore, "from_config", return_value=store):
        yield store


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_seed_default_chunk_size(self):
        args = build_parser().parse_args(["seed", "items.yaml"])
        assert args.chunk_size == 25


class TestShow:
    def test_empty_table(self, memory_config, capsys):
        assert main(["--config", memory_config, "show"]) == 0
        assert "lastRun: None" in capsys.readouterr().out

    def test_lists_records(self, patched_store, seeded_client, capsys):
        assert main(["show"]) == 0

        out = capsys.readouterr().out
        assert out.index("1700000000001-init") < out.index("1700000000003-backfill")
        assert "lastRun: 30" in out

    def test_pending_record_is_labelled(
        self, patched_store, table_client, table_name, capsys
    ):
        table_client.seed(table_name, [{"id": "x", "title": "1_a", "timestamp": None}])

        assert main(["show"]) == 0

        out = capsys.readouterr().out
        assert "pending  1_a" in out
        assert "lastRun: None" in out


class TestPlanAndSave:
    @pytest.fixture
    def migrations_file(self, tmp_path):
        path = tmp_path / "migrations.yaml"
        path.write_text(
            yaml.dump(
                [
                    {"title": "1700000000001-init", "timestamp": 10},
                    {"title": "1700000000002-add-index", "timestamp": 25},
                    {"title": "1700000000004-new", "timestamp": 40},
                ]
            )
        )
        return str(path)

    def test_plan_does_not_write(
        self, patched_store, seeded_client, migrations_file, capsys
    ):
        assert main(["plan", migrations_file]) == 0

        out = capsys.readouterr().out
        assert "create     1700000000004-new @ 40" in out
        assert "update     1700000000002-add-index @ 25 (id=id-2)" in out
        assert "unchanged  1700000000001-init @ 10" in out
        assert seeded_client.create_calls == []
        assert seeded_client.update_calls == []

    def test_plan_nothing_to_write(self, patched_store, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"migrations": []}))

        assert main(["plan", str(path)]) == 0
        assert "Nothing to write." in capsys.readouterr().out

    def test_save_writes(self, patched_store, seeded_client, migrations_file, capsys):
        assert main(["save", migrations_file, "--last-run", "40"]) == 0

        assert [c["title"] for c in seeded_client.create_calls] == ["1700000000004-new"]
        assert [c["id"] for c in seeded_client.update_calls] == ["id-2"]
        assert "lastRun: 40" in capsys.readouterr().out

    def test_missing_file_fails(self, patched_store, tmp_path):
        assert main(["save", str(tmp_path / "missing.yaml")]) == 1


class TestDynamoDBCommands:
    def test_init_table(self):
        with patch("datamigrations.cli.DynamoDBTableClient") as mock_cls:
            assert main(["--table", "t1", "init-table"]) == 0

        client = mock_cls.from_config.return_value
        client.create_table_if_not_exists.assert_called_once_with("t1")

    def test_init_table_rejects_memory_backend(self, memory_config):
        assert main(["--config", memory_config, "init-table"]) == 1

    def test_seed(self, tmp_path, capsys):
        path = tmp_path / "seed.yaml"
        path.write_text(
            yaml.dump(
                [
                    {"table": "users", "data": {"id": "1"}},
                    {"table": "users", "data": {"id": "2"}},
                    {"table": "orders", "data": {"id": "3"}},
                ]
            )
        )
        low_level = MagicMock()
        low_level.batch_write_item.return_value = {"UnprocessedItems": {}}

        with patch("datamigrations.cli.DynamoDBTableClient") as mock_cls:
            mock_cls.from_config.return_value.client = low_level
            assert main(["seed", str(path), "--chunk-size", "2"]) == 0

        assert low_level.batch_write_item.call_count == 2
        assert "Wrote 3 items" in capsys.readouterr().out

    def test_endpoint_override(self):
        with patch("datamigrations.cli.DynamoDBTableClient") as mock_cls:
            main(["--endpoint", "http://localhost:8000", "--region", "eu-west-1", "init-table"])

        config = mock_cls.from_config.call_args.args[0]
        assert config.endpoint_url == "http://localhost:8000"
        assert config.region == "eu-west-1"
