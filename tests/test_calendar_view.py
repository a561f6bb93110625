from datetime import date, datetime, timedelta, timezone

import pytest

from todo_calendar.client.calendar_view import (
    EMPTY_AGENDA,
    CalendarView,
    ViewMode,
    month_weeks,
    todos_for_date,
    week_days,
)
from todo_calendar.client.state import TodoStore

pytestmark = pytest.mark.anyio

UTC = timezone.utc
# UTC-4, so local midnight is 04:00Z
LOCAL = timezone(timedelta(hours=-4))
TODAY = date(2024, 6, 12)  # a Wednesday


@pytest.fixture
async def store(api):
    s = TodoStore(api)
    await s.load()
    return s


@pytest.fixture
def cal(store):
    return CalendarView(store, LOCAL, today=lambda: TODAY)


def layout_week(cal, cell_width=100, cell_height=80):
    """Lay the week strip out as one row of cells starting at the origin."""
    for i, cell in enumerate(cal.week_cells()):
        cal.register_cell(cell.date, i * cell_width, 0, cell_width, cell_height)


class TestGrids:
    async def test_week_days_start_on_sunday(self):
        days = week_days(TODAY)
        assert days[0] == date(2024, 6, 9)
        assert days[-1] == date(2024, 6, 15)
        assert week_days(date(2024, 6, 9)) == days

    async def test_month_grid_pads_outside_days(self):
        weeks = month_weeks(2024, 6)
        assert weeks[0][0] == date(2024, 5, 26)
        assert weeks[-1][-1] == date(2024, 7, 6)
        assert all(len(w) == 7 for w in weeks)

    async def test_month_cells_flags(self, cal):
        cells = [c for week in cal.month_cells() for c in week]
        by_date = {c.date: c for c in cells}
        assert by_date[date(2024, 5, 26)].in_month is False
        assert by_date[TODAY].is_today is True
        assert by_date[TODAY].is_selected is True
        assert by_date[date(2024, 6, 13)].is_selected is False
        assert cal.month_caption() == "June 2024"


class TestGrouping:
    async def test_todos_grouped_by_local_day(self, store, cal):
        # 02:00Z on June 13 is 22:00 on June 12 locally
        late = await store.add_todo("Late call", datetime(2024, 6, 13, 2, 0, tzinfo=UTC))
        all_day = await store.add_todo("Errands", datetime(2024, 6, 12, 4, 0, tzinfo=UTC))
        await store.add_todo("Tomorrow", datetime(2024, 6, 13, 15, 0, tzinfo=UTC))
        await store.add_todo("Backlog")

        assert [t.id for t in todos_for_date(store.todos, TODAY, LOCAL)] == [all_day.id, late.id]

        cells = {c.date: c for c in cal.week_cells()}
        assert cells[TODAY].todo_count == 2
        assert cells[TODAY].badge == "2 tasks"
        assert cells[date(2024, 6, 13)].badge == "1 task"
        assert cells[date(2024, 6, 14)].badge == ""

    async def test_agenda_for_selected_day(self, store, cal):
        await store.add_todo("Late call", datetime(2024, 6, 13, 2, 0, tzinfo=UTC))
        await store.add_todo("Errands", datetime(2024, 6, 12, 4, 0, tzinfo=UTC))

        agenda = cal.agenda()
        assert [(e.time_label, e.text) for e in agenda] == [("All day", "Errands"), ("22:00", "Late call")]
        assert cal.agenda(date(2024, 6, 20)) == []
        assert EMPTY_AGENDA == "No tasks scheduled for this day"

    async def test_selected_caption(self, cal):
        cal.select_date(date(2024, 6, 1))
        assert cal.selected_caption() == "Selected: Saturday, June 1, 2024"
        cal.select_date(None)
        assert cal.selected_caption() is None


class TestNavigation:
    async def test_week_navigation_and_today(self, cal):
        cal.set_view_mode(ViewMode.WEEK)
        assert cal.week_caption() == "June 2024"

        cal.navigate_week(-1)
        cal.navigate_week(-1)
        assert [c.date for c in cal.week_cells()][0] == date(2024, 5, 26)
        assert cal.week_caption() == "May - Jun 2024"

        cal.select_date(date(2024, 5, 28))
        cal.go_to_today()
        assert week_days(cal.week_anchor)[0] == date(2024, 6, 9)
        assert cal.selected_date == TODAY

    async def test_month_navigation_wraps_years(self, cal):
        for _ in range(7):
            cal.navigate_month(1)
        assert cal.visible_month == date(2025, 1, 1)
        cal.navigate_month(-1)
        assert cal.month_caption() == "December 2024"


class TestDrop:
    async def test_drop_schedules_midnight_and_selects_day(self, store, cal):
        todo = await store.add_todo("Backlog item")
        store.set_dragged_todo_id(todo.id)

        assert await cal.drop_on_day(date(2024, 6, 20)) is True
        updated = store.get(todo.id)
        assert updated.text == "Backlog item"
        assert updated.scheduled_at == datetime(2024, 6, 20, 4, 0, tzinfo=UTC)
        assert cal.selected_date == date(2024, 6, 20)
        assert store.dragged_todo_id is None
        assert cal.agenda()[0].time_label == "All day"

    async def test_drop_discards_previous_time_of_day(self, store, cal):
        todo = await store.add_todo("Meeting", datetime(2024, 6, 10, 13, 45, tzinfo=UTC))
        store.set_dragged_todo_id(todo.id)

        await cal.drop_on_day(date(2024, 6, 14))
        assert store.get(todo.id).scheduled_at == datetime(2024, 6, 14, 4, 0, tzinfo=UTC)

    async def test_drop_without_drag_does_nothing(self, store, cal, repo):
        todo = await store.add_todo("Untouched")
        assert await cal.drop_on_day(TODAY) is False
        assert repo.get(todo.id)["scheduled_at"] is None

    async def test_failed_drop_clears_drag_and_keeps_state(self, store, cal, repo):
        todo = await store.add_todo("Vanishing")
        repo.delete(todo.id)
        store.set_dragged_todo_id(todo.id)

        assert await cal.drop_on_day(date(2024, 6, 20)) is False
        assert store.get(todo.id).scheduled_at is None
        assert store.dragged_todo_id is None
        assert cal.selected_date == TODAY


class TestPointerTracking:
    async def test_hover_follows_pointer(self, store, cal):
        cal.set_view_mode(ViewMode.WEEK)
        layout_week(cal)
        todo = await store.add_todo("Drag me")

        # no drag in progress: nothing is tracked
        assert cal.drag_over(150, 40) is None

        store.set_dragged_todo_id(todo.id)
        assert cal.drop_hint() == "Drop on a date to schedule"
        assert cal.drag_over(150, 40) == date(2024, 6, 10)
        assert store.drag.session.pointer.x == 150
        assert [c.drag_over for c in cal.week_cells()] == [False, True, False, False, False, False, False]

        assert cal.drag_over(5000, 40) is None
        cal.drag_over(650, 10)
        assert cal.hovered_date == date(2024, 6, 15)

        # drag end clears hover
        store.set_dragged_todo_id(None)
        assert cal.hovered_date is None
        assert cal.drop_hint() is None

    async def test_drop_at_pointer_position(self, store, cal):
        cal.set_view_mode(ViewMode.WEEK)
        layout_week(cal)
        todo = await store.add_todo("Drop me")
        store.set_dragged_todo_id(todo.id)

        assert await cal.drop_at(-10, 40) is False
        assert store.dragged_todo_id == todo.id

        assert await cal.drop_at(320, 79) is True
        assert store.get(todo.id).scheduled_at == datetime(2024, 6, 12, 4, 0, tzinfo=UTC)
        assert store.dragged_todo_id is None
