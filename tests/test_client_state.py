from datetime import datetime, timedelta, timezone

import httpx
import pytest

from todo_calendar.client.api_client import TodoApiClient
from todo_calendar.client.errors import ApiNetworkError, ApiNotFoundError, ApiValidationError
from todo_calendar.client.models import Todo
from todo_calendar.client.state import LOAD_ERROR, TodoStore, sort_todos

pytestmark = pytest.mark.anyio

UTC = timezone.utc


def make_todo(todo_id, scheduled_at=None, created_at=None):
    return Todo(
        id=todo_id,
        text=todo_id,
        scheduled_at=scheduled_at,
        created_at=created_at or datetime(2024, 1, 1, tzinfo=UTC),
    )


def assert_sorted(todos):
    for a, b in zip(todos, todos[1:]):
        if a.scheduled_at and b.scheduled_at:
            assert a.scheduled_at <= b.scheduled_at
        elif b.scheduled_at:
            pytest.fail(f"unscheduled {a.id} precedes scheduled {b.id}")
        elif not a.scheduled_at:
            assert a.created_at <= b.created_at


def failing_api(status_code=None):
    def handler(request):
        if status_code is None:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(status_code, json={"error": "boom"})

    return TodoApiClient("http://testserver", timeout=1, transport=httpx.MockTransport(handler))


class TestSortTodos:
    async def test_comparator_rules(self):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        todos = [
            make_todo("backlog-new", created_at=base + timedelta(hours=2)),
            make_todo("june-1", scheduled_at=datetime(2024, 6, 1, tzinfo=UTC)),
            make_todo("backlog-old", created_at=base),
            make_todo("may-30", scheduled_at=datetime(2024, 5, 30, 9, tzinfo=UTC)),
        ]
        ordered = sort_todos(todos)
        assert [t.id for t in ordered] == ["may-30", "june-1", "backlog-old", "backlog-new"]
        assert_sorted(ordered)


class TestLoad:
    async def test_initial_state(self, api):
        store = TodoStore(api)
        assert store.is_loading is True
        assert store.todos == []
        assert store.error is None
        assert store.dragged_todo_id is None

    async def test_load_fetches_sorted_collection(self, api, repo):
        repo.create("Call mom")
        repo.create("Buy milk", datetime(2024, 6, 1, tzinfo=UTC))

        store = TodoStore(api)
        await store.load()
        assert store.is_loading is False
        assert store.error is None
        assert [t.text for t in store.todos] == ["Buy milk", "Call mom"]

    async def test_load_failure_sets_error_and_keeps_collection_empty(self):
        async with failing_api() as api:
            store = TodoStore(api)
            await store.load()
        assert store.is_loading is False
        assert store.error == LOAD_ERROR
        assert store.todos == []

    async def test_refresh_failure_keeps_last_known_state(self, api, repo):
        repo.create("Known")
        store = TodoStore(api)
        await store.load()

        store._api = failing_api(status_code=500)
        await store.refresh()
        assert store.error == LOAD_ERROR
        assert [t.text for t in store.todos] == ["Known"]
        await store._api.aclose()


class TestMutations:
    async def test_add_keeps_sort_order(self, api):
        store = TodoStore(api)
        await store.load()

        await store.add_todo("Call mom")
        await store.add_todo("Buy milk", datetime(2024, 6, 1, tzinfo=UTC))
        await store.add_todo("Standup", datetime(2024, 5, 30, 9, tzinfo=UTC))
        await store.add_todo("Read")

        assert [t.text for t in store.todos] == ["Standup", "Buy milk", "Call mom", "Read"]
        assert_sorted(store.todos)
        # client order matches the server's list order without a re-fetch
        assert [t.id for t in store.todos] == [t.id for t in await api.list_todos()]

    async def test_add_validation_error_propagates_without_state_change(self, api):
        store = TodoStore(api)
        await store.load()
        with pytest.raises(ApiValidationError) as exc_info:
            await store.add_todo("")
        assert exc_info.value.message == "Text is required"
        assert store.todos == []

    async def test_update_without_schedule_moves_to_unscheduled(self, api):
        store = TodoStore(api)
        await store.load()
        first = await store.add_todo("First", datetime(2024, 6, 1, 10, tzinfo=UTC))
        second = await store.add_todo("Second", datetime(2024, 6, 2, 10, tzinfo=UTC))

        updated = await store.update_todo(first.id, "First")
        assert updated.scheduled_at is None
        assert [t.id for t in store.todos] == [second.id, first.id]

    async def test_update_not_found_leaves_state(self, api, repo):
        store = TodoStore(api)
        await store.load()
        todo = await store.add_todo("Gone soon", datetime(2024, 6, 1, tzinfo=UTC))
        repo.delete(todo.id)

        with pytest.raises(ApiNotFoundError):
            await store.update_todo(todo.id, "Gone soon")
        assert store.todos == [todo]

    async def test_delete_removes_entry(self, api):
        store = TodoStore(api)
        await store.load()
        keep = await store.add_todo("Keep")
        drop = await store.add_todo("Drop")

        await store.delete_todo(drop.id)
        assert store.todos == [keep]

    async def test_failed_delete_keeps_item(self, api):
        store = TodoStore(api)
        await store.load()
        todo = await store.add_todo("Still here")

        store._api = failing_api()
        with pytest.raises(ApiNetworkError):
            await store.delete_todo(todo.id)
        assert store.todos == [todo]
        await store._api.aclose()

    async def test_listeners_notified(self, api):
        store = TodoStore(api)
        seen = []
        unsubscribe = store.subscribe(lambda s: seen.append(len(s.todos)))
        await store.load()
        await store.add_todo("One")
        unsubscribe()
        await store.add_todo("Two")
        assert seen == [0, 1]


class TestDraggedId:
    async def test_set_and_clear(self, api):
        store = TodoStore(api)
        store.set_dragged_todo_id("abc")
        assert store.dragged_todo_id == "abc"
        assert store.drag.session.todo_id == "abc"
        store.set_dragged_todo_id(None)
        assert store.dragged_todo_id is None
