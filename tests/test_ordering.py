from datetime import date, datetime, timedelta
from types import SimpleNamespace

from app.backend.services.ordering import (
    COMPLETED,
    DUE_TODAY,
    OVERDUE,
    UNDATED,
    UPCOMING,
    order_tasks,
    urgency_rank,
)

TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 12, 0, 0)


def _task(name, *, due=None, completed=False, age_minutes=0):
    return SimpleNamespace(
        name=name,
        due_date=due,
        completed=completed,
        created_at=NOW - timedelta(minutes=age_minutes),
    )


def test_urgency_rank_buckets():
    assert urgency_rank(_task("a", due=TODAY - timedelta(days=1)), TODAY) == OVERDUE
    assert urgency_rank(_task("b", due=TODAY), TODAY) == DUE_TODAY
    assert urgency_rank(_task("c", due=TODAY + timedelta(days=1)), TODAY) == UPCOMING
    assert urgency_rank(_task("d"), TODAY) == UNDATED
    assert urgency_rank(_task("e", due=TODAY - timedelta(days=5), completed=True), TODAY) == COMPLETED


def test_order_is_independent_of_insertion_order():
    tasks = [
        _task("completed", due=TODAY - timedelta(days=3), completed=True),
        _task("no-date"),
        _task("future", due=TODAY + timedelta(days=2)),
        _task("today", due=TODAY),
        _task("overdue", due=TODAY - timedelta(days=1)),
    ]
    expected = ["overdue", "today", "future", "no-date", "completed"]

    assert [t.name for t in order_tasks(tasks, TODAY)] == expected
    assert [t.name for t in order_tasks(reversed(tasks), TODAY)] == expected


def test_same_rank_sorts_by_due_date_then_newest_first():
    tasks = [
        _task("later", due=TODAY + timedelta(days=9), age_minutes=1),
        _task("sooner-old", due=TODAY + timedelta(days=2), age_minutes=30),
        _task("sooner-new", due=TODAY + timedelta(days=2), age_minutes=5),
    ]

    assert [t.name for t in order_tasks(tasks, TODAY)] == ["sooner-new", "sooner-old", "later"]


def test_completed_rank_puts_undated_last():
    tasks = [
        _task("done-undated", completed=True, age_minutes=1),
        _task("done-dated", due=TODAY + timedelta(days=20), completed=True, age_minutes=50),
    ]

    assert [t.name for t in order_tasks(tasks, TODAY)] == ["done-dated", "done-undated"]


def test_undated_rank_newest_first():
    tasks = [_task("old", age_minutes=60), _task("new", age_minutes=1)]

    assert [t.name for t in order_tasks(tasks, TODAY)] == ["new", "old"]
