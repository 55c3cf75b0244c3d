"""Tests for the settingsctl CLI against the JSON file backend."""

import json

import pytest
from click.testing import CliRunner

from settings_store.cli import cli


@pytest.fixture
def run(data_dir, monkeypatch):
    monkeypatch.delenv("SETTINGS_STORE_BACKEND", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ["--backend", "file", "--data-dir", str(data_dir), *args])

    return _run


class TestSettingsCtl:
    def test_set_and_get(self, run):
        result = run("set", "ns1", "K1", "foo")
        assert result.exit_code == 0, result.output
        result = run("get", "ns1", "K1")
        assert result.exit_code == 0
        assert json.loads(result.output) == "foo"

    def test_set_parses_json(self, run):
        run("set", "ns1", "limits", '{"max": 3, "tags": ["a"]}')
        result = run("get", "ns1", "limits")
        assert json.loads(result.output) == {"max": 3, "tags": ["a"]}

    def test_set_string_flag(self, run):
        run("set", "ns1", "n", "42", "--string")
        result = run("get", "ns1", "n")
        assert json.loads(result.output) == "42"

    def test_get_missing_exits_nonzero(self, run):
        result = run("get", "ns1", "missing")
        assert result.exit_code == 1

    def test_object_round_trip(self, run):
        run("set", "ns1", "obj", '{"id": 1, "name": "Foo"}', "--object")
        result = run("get", "ns1", "obj", "--object")
        assert json.loads(result.output) == {"id": 1, "name": "Foo"}
        raw = run("get", "ns1", "obj")
        assert "$bytes" in json.loads(raw.output)

    def test_keys_and_remove(self, run):
        run("set", "ns1", "b", "1")
        run("set", "ns1", "a", "2")
        result = run("keys", "ns1")
        assert result.output.splitlines() == ["a", "b"]

        run("remove", "ns1", "a")
        result = run("keys", "ns1")
        assert result.output.splitlines() == ["b"]

    def test_clean(self, run):
        for key in ("A", "B", "C"):
            run("set", "ns1", key, "1")
        result = run("clean", "ns1", "--keep", "B")
        assert json.loads(result.output) == {"removed": 2, "kept": 1}
        assert run("keys", "ns1").output.splitlines() == ["B"]

    def test_reset_requires_confirmation(self, run, data_dir):
        run("set", "ns1", "A", "1")
        result = run("reset", "ns1")
        assert result.exit_code != 0
        assert (data_dir / "ns1.json").exists()

        result = run("reset", "ns1", "--yes")
        assert result.exit_code == 0
        assert not (data_dir / "ns1.json").exists()

    def test_dump(self, run):
        run("set", "ns1", "A", "1")
        run("set", "ns1", "B", '"two"')
        result = run("dump", "ns1")
        assert json.loads(result.output) == {"A": 1, "B": "two"}

    def test_namespaces_are_isolated(self, run):
        run("set", "ns1", "A", "1")
        assert run("keys", "ns2").output == ""

    def test_invalid_namespace(self, run):
        result = run("keys", "../escape")
        assert result.exit_code == 1
        assert "ValidationError" in result.output

    def test_corrupt_namespace_file(self, run, data_dir):
        (data_dir / "ns1.json").write_text("{broken", encoding="utf-8")
        result = run("keys", "ns1")
        assert result.exit_code == 1
        assert "NamespaceUnavailableError" in result.output

    def test_logs_carry_namespace_and_command(self, run):
        result = run("--log-level", "DEBUG", "set", "ns1", "K1", "foo")
        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
        opened = [r for r in records if r["event"] == "backend_opened"]
        assert opened and opened[0]["namespace"] == "ns1"
        assert opened[0]["command"] == "set"
