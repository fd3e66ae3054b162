"""Tests for the daily rollover."""

from datetime import date, timedelta

import pytest

from dwmyo.core.rollover import move_uncompleted_to_next_day, overdue_unfinished, rollover
from dwmyo.core.tasks import Task


@pytest.fixture
def today():
    return date(2024, 1, 16)


@pytest.fixture
def tasks(today):
    return [
        Task(id="old", text="Overdue", date=today - timedelta(days=5)),
        Task(id="done", text="Finished", date=today - timedelta(days=5), completed=True),
        Task(id="now", text="Today", date=today),
        Task(id="later", text="Upcoming", date=today + timedelta(days=3)),
    ]


class TestRollover:
    def test_end_to_end_scenario(self):
        """A task from two days ago lands on today after the first run."""
        tasks = [Task(id="1", text="Write report", date=date(2024, 1, 14))]
        result = rollover(tasks, None, date(2024, 1, 16))

        assert tasks[0].date == date(2024, 1, 16)
        assert result.marker == date(2024, 1, 16)
        assert result.moved == 1
        assert result.ran is True

    def test_moves_only_overdue_unfinished(self, tasks, today):
        rollover(tasks, None, today)
        dates = {t.id: t.date for t in tasks}

        assert dates["old"] == today
        assert dates["done"] == today - timedelta(days=5)
        assert dates["now"] == today
        assert dates["later"] == today + timedelta(days=3)

    def test_updates_in_place(self, tasks, today):
        originals = list(tasks)
        result = rollover(tasks, None, today)

        assert result.tasks is tasks
        assert len(tasks) == 4
        assert all(a is b for a, b in zip(originals, tasks))
        assert tasks[0].text == "Overdue"
        assert tasks[0].id == "old"

    def test_gate_skips_second_run_same_day(self, tasks, today):
        first = rollover(tasks, None, today)
        tasks.append(Task(id="late", text="Added after", date=today - timedelta(days=1)))
        second = rollover(tasks, first.marker, today)

        assert second.ran is False
        assert second.moved == 0
        assert second.marker == today
        assert tasks[-1].date == today - timedelta(days=1)

    def test_marker_written_on_no_op_day(self, today):
        tasks = [Task(id="1", text="Fine", date=today)]
        result = rollover(tasks, today - timedelta(days=1), today)

        assert result.ran is True
        assert result.moved == 0
        assert result.marker == today

    def test_runs_again_next_day(self, today):
        tasks = [Task(id="1", text="Still open", date=today)]
        rollover(tasks, None, today)
        tomorrow = today + timedelta(days=1)
        result = rollover(tasks, today, tomorrow)

        assert result.moved == 1
        assert tasks[0].date == tomorrow

    def test_never_moves_backward(self, today):
        future = today + timedelta(days=10)
        tasks = [Task(id="1", text="Future", date=future)]
        rollover(tasks, None, today)
        assert tasks[0].date == future

    @pytest.mark.parametrize("days_back", [1, 2, 30, 400])
    def test_any_overdue_distance(self, today, days_back):
        tasks = [
            Task(id="open", text="Open", date=today - timedelta(days=days_back)),
            Task(id="closed", text="Closed", date=today - timedelta(days=days_back), completed=True),
        ]
        rollover(tasks, None, today)
        assert tasks[0].date == today
        assert tasks[1].date == today - timedelta(days=days_back)

    def test_empty_collection(self, today):
        result = rollover([], None, today)
        assert result.tasks == []
        assert result.marker == today


class TestOverdueUnfinished:
    def test_selection(self, tasks, today):
        assert [t.id for t in overdue_unfinished(tasks, today)] == ["old"]


class TestMoveUncompletedToNextDay:
    def test_moves_unfinished(self, tasks, today):
        moved = move_uncompleted_to_next_day(tasks, today - timedelta(days=5))
        assert moved == 1
        assert tasks[0].date == today - timedelta(days=4)
        assert tasks[1].date == today - timedelta(days=5)

    def test_month_boundary(self):
        tasks = [Task(id="1", text="x", date=date(2024, 1, 31))]
        move_uncompleted_to_next_day(tasks, date(2024, 1, 31))
        assert tasks[0].date == date(2024, 2, 1)

    def test_nothing_to_move(self, tasks):
        assert move_uncompleted_to_next_day(tasks, date(2000, 1, 1)) == 0
