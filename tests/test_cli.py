"""Tests for the command-line interface."""

import json
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from dwmyo.cli import main
from dwmyo.config import Config
from dwmyo.core.tasks import Task
from dwmyo.workflows import get_marker_store, get_task_store


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path / "data"), export_dir=str(tmp_path / "exports"))


@pytest.fixture
def runner(config):
    """Invoke the CLI against a temporary data directory."""
    cli_runner = CliRunner()

    def _invoke(*args):
        with patch("dwmyo.cli.load_config", return_value=config):
            return cli_runner.invoke(main, list(args))
    return _invoke


@pytest.fixture
def far_date():
    return "2099-01-01"


class TestTaskCommands:
    def test_add_then_list_day(self, runner, far_date):
        result = runner("add", "Write report", "--date", far_date, "--tags", "work, Writing")
        assert result.exit_code == 0
        assert "Added" in result.output

        result = runner("day", "--date", far_date, "--json")
        data = json.loads(result.output)
        assert [t["text"] for t in data] == ["Write report"]
        assert data[0]["tags"] == ["work", "Writing"]

    def test_add_blank_text_fails(self, runner):
        result = runner("add", "   ")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_add_bad_date_fails(self, runner):
        result = runner("add", "Something", "--date", "next tuesday")
        assert result.exit_code != 0
        assert "YYYY-MM-DD" in result.output

    def test_edit(self, runner, config, far_date):
        get_task_store(config).save([Task(id="t1", text="Old", date=date(2099, 1, 1))])

        result = runner("edit", "t1", "--text", "New", "--pin")
        assert result.exit_code == 0

        task = get_task_store(config).load()[0]
        assert task.text == "New"
        assert task.pinned is True

    def test_edit_unknown(self, runner):
        result = runner("edit", "nope", "--text", "x")
        assert result.exit_code == 1
        assert "No task with id" in result.output

    def test_toggle(self, runner, config):
        get_task_store(config).save([Task(id="t1", text="Gym", date=date(2099, 1, 1))])

        result = runner("toggle", "t1")
        assert result.exit_code == 0
        assert "Done: Gym" in result.output
        assert get_task_store(config).load()[0].completed is True

    def test_rm(self, runner, config):
        get_task_store(config).save([Task(id="t1", text="Gym", date=date(2099, 1, 1))])

        assert runner("rm", "t1").exit_code == 0
        assert get_task_store(config).load() == []
        assert runner("rm", "t1").exit_code == 1

    def test_tags(self, runner, config):
        get_task_store(config).save([
            Task(id="1", text="a", date=date(2099, 1, 1), tags=["work", "call"]),
            Task(id="2", text="b", date=date(2099, 1, 2), tags=["call"]),
        ])
        result = runner("tags")
        assert result.output.split() == ["call", "work"]

    def test_carry(self, runner, config):
        get_task_store(config).save([Task(id="1", text="a", date=date(2099, 1, 1))])
        result = runner("carry", "--date", "2099-01-01")
        assert "Moved 1 task(s)" in result.output
        assert get_task_store(config).load()[0].date == date(2099, 1, 2)


class TestViews:
    def test_overview_json(self, runner, config):
        today = date.today()
        get_task_store(config).save([
            Task(id="1", text="Now", date=today),
            Task(id="2", text="Soon", date=today + timedelta(days=2)),
            Task(id="3", text="Far", date=today + timedelta(days=90), pinned=True),
        ])
        data = json.loads(runner("overview", "--json").output)

        assert [t["text"] for t in data["today"]] == ["Now"]
        assert [t["text"] for t in data["next_7"]] == ["Soon"]
        assert data["next_28"] == []
        assert [t["text"] for t in data["next_365"]] == ["Far"]

    def test_overview_collapses_far_future(self, runner, config):
        config.preview_limit = 1
        today = date.today()
        get_task_store(config).save([
            Task(id=str(i), text=f"Far {i}", date=today + timedelta(days=40 + i), pinned=True)
            for i in range(3)
        ])
        output = runner("overview").output
        assert "Far 0" in output
        assert "Far 2" not in output
        assert "2 more" in output

        output = runner("overview", "--all").output
        assert "Far 2" in output

    def test_overview_filter(self, runner, config):
        today = date.today()
        get_task_store(config).save([
            Task(id="1", text="Standup", date=today, tags=["Meeting"]),
            Task(id="2", text="Gym", date=today),
        ])
        data = json.loads(runner("overview", "--filter", "meet", "--json").output)
        assert [t["text"] for t in data["today"]] == ["Standup"]

    def test_month_grid(self, runner):
        result = runner("month", "--year", "2024", "--month", "1")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "January 2024"
        assert lines[1].split() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
        assert len(lines) == 2 + 5

    def test_month_offset(self, runner):
        result = runner("month", "--year", "2024", "--month", "1", "--offset", "-1")
        assert result.output.splitlines()[0] == "December 2023"


class TestRollover:
    def test_runs_on_startup(self, runner, config):
        get_task_store(config).save([Task(id="1", text="Late", date=date(2020, 5, 1))])
        runner("tags")
        assert get_task_store(config).load()[0].date == date.today()
        assert get_marker_store(config).load() == date.today()

    def test_no_rollover_flag(self, runner, config):
        get_task_store(config).save([Task(id="1", text="Late", date=date(2020, 5, 1))])
        runner("--no-rollover", "tags")
        assert get_task_store(config).load()[0].date == date(2020, 5, 1)

    def test_today_read_once_per_invocation(self, runner, config):
        get_task_store(config).save([
            Task(id="1", text="Late", date=date(2024, 1, 14)),
            Task(id="2", text="Tomorrow", date=date(2024, 1, 17)),
        ])

        with patch("dwmyo.cli._clock_today", return_value=date(2024, 1, 16)) as clock:
            result = runner("overview", "--json")

        assert clock.call_count == 1
        data = json.loads(result.output)
        assert [t["text"] for t in data["today"]] == ["Late"]
        assert [t["text"] for t in data["next_7"]] == ["Tomorrow"]
        assert get_task_store(config).load()[0].date == date(2024, 1, 16)
        assert get_marker_store(config).load() == date(2024, 1, 16)

    def test_rollover_command_once_per_day(self, runner, config):
        get_task_store(config).save([Task(id="1", text="Late", date=date(2020, 5, 1))])

        first = runner("rollover")
        assert "Moved 1 task(s)" in first.output

        second = runner("rollover")
        assert "already ran today" in second.output


class TestImportExport:
    def test_export(self, runner, config, tmp_path):
        get_task_store(config).save([Task(id="1", text="Gym", date=date(2099, 1, 1))])

        result = runner("export")
        assert result.exit_code == 0
        expected = tmp_path / "exports" / f"dwmyo-export-{date.today().isoformat()}.ics"
        assert expected.exists()
        assert "SUMMARY:Gym" in expected.read_text()

    def test_export_failure(self, runner, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        result = runner("export", "--output-dir", str(blocker))
        assert result.exit_code == 1
        assert "Export failed" in result.output

    def test_import(self, runner, config, tmp_path):
        get_task_store(config).save([])
        ics = tmp_path / "in.ics"
        ics.write_text(
            "BEGIN:VCALENDAR\nBEGIN:VEVENT\nSUMMARY:Trip\nDTSTART:20990301\nEND:VEVENT\nEND:VCALENDAR\n"
        )

        result = runner("import", str(ics))
        assert result.exit_code == 0
        assert "Imported 1 event(s)." in result.output
        assert [t.text for t in get_task_store(config).load()] == ["Trip"]
