"""Tests for the command line interface."""

import json
from datetime import datetime

import pytest
from click.testing import CliRunner

from fourd.adapters.memory_store import MemoryTaskStore
from fourd.cli import main
from fourd.config import Config
from fourd.core.categories import Category
from fourd.core.tasks import AuthorizationState
from fourd.workflows import TaskCoordinator


@pytest.fixture
def coordinator():
    return TaskCoordinator(MemoryTaskStore(), clock=lambda: datetime(2025, 1, 15, 14, 0))


@pytest.fixture
def run(coordinator):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main, list(args), obj=coordinator)

    return _run


class TestAdd:
    def test_adds_task(self, run, coordinator):
        result = run("add", "!!", "Call", "bob", "-c", "3")
        assert result.exit_code == 0
        assert "Added to Delegate: Call bob" in result.output
        assert "due 2025-01-18" in result.output
        [task] = coordinator.fetch_active()
        assert task.priority == 5

    def test_defaults_to_do(self, run, coordinator):
        run("add", "Buy milk")
        assert coordinator.fetch_active()[0].category is Category.DO

    def test_invalid_category(self, run):
        result = run("add", "Buy milk", "-c", "someday")
        assert result.exit_code == 2
        assert "someday" in result.output

    def test_validation_error(self, run):
        result = run("add", "!!!")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_not_authorized(self):
        coordinator = TaskCoordinator(MemoryTaskStore(AuthorizationState.DENIED))
        result = CliRunner().invoke(main, ["add", "Buy milk"], obj=coordinator)
        assert result.exit_code == 1
        assert "denied" in result.output


class TestList:
    def test_grouped(self, run, coordinator):
        coordinator.create("Buy milk", Category.DO)
        coordinator.create("Plan offsite", Category.DEFER)
        result = run("list")
        assert result.exit_code == 0
        assert "🔥 Do Today (1)" in result.output
        assert "📅 Deferred (1)" in result.output
        assert "Plan offsite (due in 5d)" in result.output

    def test_json_with_filter(self, run, coordinator):
        coordinator.create("Buy milk #home", Category.DO)
        coordinator.create("Plan offsite", Category.DEFER)
        result = run("list", "--json", "-c", "do")
        data = json.loads(result.output)
        assert [t["title"] for t in data] == ["Buy milk #home"]
        assert data[0]["notes"] == "Context: #home"

    def test_empty(self, run):
        assert "No active tasks." in run("list").output


class TestActions:
    def test_done_by_prefix(self, run, coordinator):
        task = coordinator.create("Pay rent", Category.DO)
        result = run("done", task.id[:6])
        assert result.exit_code == 0
        assert "✓ Pay rent" in result.output
        assert coordinator.fetch_active() == []

    def test_done_unknown_id(self, run):
        result = run("done", "zzz")
        assert result.exit_code == 1
        assert "matches no active task" in result.output

    def test_defer(self, run, coordinator):
        task = coordinator.create("Renew passport", Category.DO)
        result = run("defer", task.id, "--days", "2")
        assert result.exit_code == 0
        assert coordinator.fetch_active()[0].due_date.isoformat() == "2025-01-17"

    def test_move(self, run, coordinator):
        task = coordinator.create("Draft budget", Category.DO)
        result = run("move", task.id, "drop")
        assert result.exit_code == 0
        assert "Moved to Drop: Draft budget" in result.output
        assert coordinator.fetch_active()[0].category is Category.DROP

    def test_rm(self, run, coordinator):
        task = coordinator.create("Cancel gym", Category.DROP)
        result = run("rm", task.id)
        assert result.exit_code == 0
        assert coordinator.fetch_active() == []


class TestStats:
    def test_json(self, run, coordinator):
        coordinator.create("!!! Urgent", Category.DO)
        coordinator.create("Someday", Category.DROP)
        data = json.loads(run("stats", "--json").output)
        assert data["total"] == 2
        assert data["by_priority"]["high"] == 1
        assert data["by_due_date"]["due_today"] == 1

    def test_text(self, run, coordinator):
        coordinator.create("Urgent", Category.DO)
        result = run("stats")
        assert result.exit_code == 0
        assert result.output.startswith("1 Do")


class TestLists:
    def test_shows_all_categories(self, run):
        result = run("lists")
        assert result.exit_code == 0
        for category in Category:
            assert category.list_title in result.output


class TestConfigurationFailures:
    """Failures while building the coordinator from fourd.conf."""

    @pytest.fixture
    def configure(self, monkeypatch):
        def _configure(config):
            monkeypatch.setattr("fourd.cli.load_config", lambda: config)

        return _configure

    def test_corrupt_data_file(self, configure, tmp_path):
        path = tmp_path / "tasks.json"
        path.write_text("{not json")
        configure(Config(data_file=str(path)))

        result = CliRunner().invoke(main, ["list"])
        assert result.exit_code == 1
        assert "Error: Failed to read" in result.output

    @pytest.mark.parametrize("args", [["list"], ["stats"], ["done", "abc"], ["rm", "abc"]])
    def test_unknown_store(self, configure, args):
        configure(Config(store="sqlite"))
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 1
        assert "Error: Unknown STORE 'sqlite'" in result.output

    def test_unknown_timezone(self, configure, tmp_path):
        configure(Config(data_file=str(tmp_path / "tasks.json"), timezone="Mars/Olympus"))
        result = CliRunner().invoke(main, ["add", "Buy milk"])
        assert result.exit_code == 1
        assert "Error: Unknown TIMEZONE 'Mars/Olympus'" in result.output
