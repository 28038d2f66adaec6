import math
from datetime import datetime, timedelta, timezone

import pytest

from todo_api.models import Priority
from todo_api.query import (
    TodoFilters,
    TodoOrdering,
    build_predicate,
    compare,
    paginate_cursor,
    paginate_offset,
    select_todos,
    sort_todos,
    sort_value,
)

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)
PRIORITIES = [Priority.LOW, Priority.MEDIUM, Priority.HIGH]


def make_todo(i, title=None, completed=False, days=0, priority=Priority.MEDIUM):
    return {
        "id": str(i),
        "title": title if title is not None else f"Task {i}",
        "completed": completed,
        "date": BASE + timedelta(days=days),
        "priority": priority,
    }


@pytest.fixture
def todos():
    # Deliberate duplicates in every sortable field to exercise stability
    return [
        make_todo(i, title=f"T{i % 4}", completed=i % 2 == 0, days=i % 5, priority=PRIORITIES[i % 3])
        for i in range(1, 24)
    ]


def ids(items):
    return [t["id"] for t in items]


class TestPredicate:
    def test_no_constraints_accepts_everything(self, todos):
        predicate = build_predicate(TodoFilters())
        assert all(predicate(t) for t in todos)

    @pytest.mark.parametrize(
        "filters",
        [
            TodoFilters(completed=True),
            TodoFilters(completed=False, priority=Priority.HIGH),
            TodoFilters(date_gte=BASE + timedelta(days=1), date_lte=BASE + timedelta(days=3)),
            TodoFilters(completed=True, priority=Priority.LOW, date_gte=BASE + timedelta(days=2)),
        ],
    )
    def test_result_is_subset_satisfying_every_constraint(self, todos, filters):
        selected = select_todos(todos, filters, TodoOrdering())
        assert set(ids(selected)) <= set(ids(todos))
        for t in selected:
            if filters.completed is not None:
                assert t["completed"] is filters.completed
            if filters.priority is not None:
                assert t["priority"] == filters.priority
            if filters.date_gte is not None:
                assert t["date"] >= filters.date_gte
            if filters.date_lte is not None:
                assert t["date"] <= filters.date_lte
        # nothing matching was dropped
        predicate = build_predicate(filters)
        assert len(selected) == sum(1 for t in todos if predicate(t))

    def test_date_bounds_are_inclusive(self):
        todo = make_todo(1, days=2)
        exact = BASE + timedelta(days=2)
        assert build_predicate(TodoFilters(date_gte=exact, date_lte=exact))(todo)
        assert not build_predicate(TodoFilters(date_gte=exact + timedelta(seconds=1)))(todo)


class TestSortValue:
    def test_projections(self):
        todo = make_todo(7, title="Write", completed=True, days=0, priority=Priority.HIGH)
        assert sort_value(todo, "id") == "7"
        assert sort_value(todo, "title") == "Write"
        assert sort_value(todo, "completed") == 1
        assert sort_value(todo, "date") == int(BASE.timestamp() * 1000)
        assert sort_value(todo, "priority") == 3
        assert sort_value(make_todo(1, priority=Priority.LOW), "priority") == 1
        assert sort_value(make_todo(1, priority=Priority.MEDIUM), "priority") == 2

    def test_unknown_field_fails(self):
        with pytest.raises(KeyError):
            sort_value(make_todo(1), "colour")

    def test_ids_compare_lexicographically(self):
        ordered = sort_todos([make_todo(10), make_todo(9), make_todo(1)], TodoOrdering(field="id"))
        assert ids(ordered) == ["1", "10", "9"]


class TestCompare:
    def test_three_way(self):
        assert compare(1, 2) == -1
        assert compare(2, 1) == 1
        assert compare("a", "a") == 0
        assert compare(1, 2, "desc") == 1
        assert compare(2, 1, "desc") == -1
        assert compare(3, 3, "desc") == 0


class TestOrdering:
    @pytest.mark.parametrize("field", ["id", "title", "completed", "date", "priority"])
    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_ordered_and_stable(self, todos, field, order):
        ordered = sort_todos(todos, TodoOrdering(field=field, order=order))
        assert sorted(ids(ordered)) == sorted(ids(todos))
        position = {t["id"]: i for i, t in enumerate(todos)}
        for a, b in zip(ordered, ordered[1:]):
            va, vb = sort_value(a, field), sort_value(b, field)
            if va == vb:
                # ties keep their input order, also when descending
                assert position[a["id"]] < position[b["id"]]
            elif order == "asc":
                assert va < vb
            else:
                assert va > vb

    def test_sort_does_not_mutate_input(self, todos):
        before = ids(todos)
        sort_todos(todos, TodoOrdering(field="title", order="desc"))
        assert ids(todos) == before


class TestOffsetPagination:
    @pytest.mark.parametrize("limit", [1, 3, 5, 23, 50])
    def test_pages_reconstruct_sequence(self, todos, limit):
        pages = math.ceil(len(todos) / limit)
        collected = []
        for page in range(1, pages + 1):
            result = paginate_offset(todos, page, limit)
            assert result.total_todos == len(todos)
            assert result.has_next_page is (page < pages)
            assert result.next_page == (page + 1 if page < pages else None)
            collected.extend(result.todos)
        assert ids(collected) == ids(todos)

    def test_out_of_range_page_is_empty(self, todos):
        result = paginate_offset(todos, 99, 10)
        assert result.todos == []
        assert result.total_todos == len(todos)
        assert result.has_next_page is False
        assert result.next_page is None

    def test_empty_sequence(self):
        result = paginate_offset([], 1, 10)
        assert result.todos == []
        assert result.total_todos == 0
        assert result.has_next_page is False


class TestCursorPagination:
    @pytest.mark.parametrize("limit", [1, 4, 23, 40])
    def test_following_cursor_reconstructs_sequence(self, todos, limit):
        collected = []
        cursor = 0
        while True:
            batch = paginate_cursor(todos, cursor, limit)
            collected.extend(batch.todos)
            if not batch.has_next_page:
                assert batch.next_cursor is None
                break
            assert batch.next_cursor == cursor + len(batch.todos)
            cursor = batch.next_cursor
        assert ids(collected) == ids(todos)

    def test_cursor_past_end(self, todos):
        batch = paginate_cursor(todos, 100, 5)
        assert batch.todos == []
        assert batch.next_cursor is None
        assert batch.has_next_page is False

    def test_offset_and_cursor_agree(self, todos):
        ordered = sort_todos(todos, TodoOrdering(field="priority", order="desc"))
        for page in range(1, 5):
            offset = paginate_offset(ordered, page, 6)
            cursor = paginate_cursor(ordered, (page - 1) * 6, 6)
            assert ids(offset.todos) == ids(cursor.todos)
            assert offset.has_next_page is cursor.has_next_page
