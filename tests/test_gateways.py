"""Tests for the in-memory and JSON-file gateways."""

import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from taskdeck.adapters.json_file import JsonFileGateway
from taskdeck.adapters.memory import InMemoryGateway
from taskdeck.core.models import (
    Category,
    CategoryInput,
    CategoryUpdate,
    Priority,
    TaskInput,
    TaskUpdate,
)
from taskdeck.ports.task_gateway import PersistenceError


@pytest.fixture
def gateway(make_task, work, home):
    return InMemoryGateway(
        tasks=[
            make_task("1", "Old", age=1, categories=(work,)),
            make_task("2", "New", age=5),
            make_task("3", "Someone else's", owner="u2"),
        ],
        categories=[work, home],
    )


class TestInMemoryTasks:
    @pytest.mark.asyncio
    async def test_fetch_is_scoped_and_newest_first(self, gateway, work):
        tasks = await gateway.fetch_tasks("u1")
        assert [t.id for t in tasks] == ["2", "1"]
        assert tasks[1].categories == (work,)

    @pytest.mark.asyncio
    async def test_create(self, gateway):
        task = await gateway.create_task(
            "u1", TaskInput(title="Write tests", description="", deadline=date(2025, 2, 1), priority=Priority.HIGH)
        )
        assert task.id
        assert task.owner == "u1"
        assert task.description is None
        assert task.completed is False
        assert task.created_at == task.updated_at
        assert task.id in {t.id for t in await gateway.fetch_tasks("u1")}

    @pytest.mark.asyncio
    async def test_create_normalizes_priority(self, gateway):
        task = await gateway.create_task("u1", TaskInput(title="Loose", priority="HIGH"))
        assert task.priority is Priority.HIGH

    @pytest.mark.asyncio
    async def test_update_keeps_categories(self, gateway, work):
        task = await gateway.update_task("1", TaskUpdate(title="Renamed", deadline=date(2025, 3, 1)))
        assert task.title == "Renamed"
        assert task.deadline == date(2025, 3, 1)
        assert task.categories == (work,)
        assert task.updated_at > task.created_at

    @pytest.mark.asyncio
    async def test_update_clears_description(self, gateway):
        await gateway.update_task("2", TaskUpdate(description="text"))
        task = await gateway.update_task("2", TaskUpdate(description=""))
        assert task.description is None

    @pytest.mark.asyncio
    async def test_toggle_completion(self, gateway):
        assert (await gateway.toggle_completion("2", True)).completed is True
        assert (await gateway.toggle_completion("2", False)).completed is False

    @pytest.mark.asyncio
    async def test_delete_removes_links(self, gateway, work):
        await gateway.delete_task("1")
        assert [t.id for t in await gateway.fetch_tasks("u1")] == ["2"]
        assert ("1", work.id) not in gateway._links

    @pytest.mark.asyncio
    async def test_unknown_task(self, gateway):
        with pytest.raises(PersistenceError, match="not found"):
            await gateway.update_task("missing", TaskUpdate(title="x"))
        with pytest.raises(PersistenceError):
            await gateway.delete_task("missing")


class TestInMemoryAssociations:
    @pytest.mark.asyncio
    async def test_replace_categories(self, gateway, home):
        task = await gateway.set_task_categories("1", ["c-home"])
        assert task.categories == (home,)

    @pytest.mark.asyncio
    async def test_empty_list_clears(self, gateway):
        task = await gateway.set_task_categories("1", [])
        assert task.categories == ()

    @pytest.mark.asyncio
    async def test_duplicates_collapse(self, gateway, work):
        task = await gateway.set_task_categories("2", ["c-work", "c-work"])
        assert task.categories == (work,)

    @pytest.mark.asyncio
    async def test_other_owners_category_rejected(self, gateway):
        gateway._categories["c-x"] = Category(id="c-x", name="Theirs", owner="u2")
        with pytest.raises(PersistenceError, match="another user"):
            await gateway.set_task_categories("1", ["c-x"])

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, gateway, work):
        with pytest.raises(PersistenceError):
            await gateway.set_task_categories("1", ["nope"])
        task = (await gateway.fetch_tasks("u1"))[1]
        assert task.categories == (work,)


class TestInMemoryCategories:
    @pytest.mark.asyncio
    async def test_fetch_sorted_by_name(self, gateway):
        assert [c.name for c in await gateway.fetch_categories("u1")] == ["Home", "Work"]
        assert await gateway.fetch_categories("u2") == []

    @pytest.mark.asyncio
    async def test_create_and_update(self, gateway):
        category = await gateway.create_category("u1", CategoryInput(name="Errands", icon=""))
        assert category.color == "#3b82f6"
        assert category.icon is None

        updated = await gateway.update_category(category.id, CategoryUpdate(color="#000000", icon="🛒"))
        assert updated.name == "Errands"
        assert updated.color == "#000000"
        assert updated.icon == "🛒"

    @pytest.mark.asyncio
    async def test_update_propagates_to_tasks(self, gateway):
        await gateway.update_category("c-work", CategoryUpdate(name="Job"))
        task = (await gateway.fetch_tasks("u1"))[1]
        assert [c.name for c in task.categories] == ["Job"]

    @pytest.mark.asyncio
    async def test_delete_detaches_from_tasks(self, gateway):
        await gateway.delete_category("c-work")
        task = (await gateway.fetch_tasks("u1"))[1]
        assert task.categories == ()
        assert [c.id for c in await gateway.fetch_categories("u1")] == ["c-home"]


class TestJsonFileGateway:
    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "store.json"
        first = JsonFileGateway(path)
        category = await first.create_category("local", CategoryInput(name="Work"))
        task = await first.create_task("local", TaskInput(title="Ship", deadline=date(2025, 1, 20)))
        await first.set_task_categories(task.id, [category.id])
        await first.toggle_completion(task.id, True)

        second = JsonFileGateway(path)
        [loaded] = await second.fetch_tasks("local")
        assert loaded.title == "Ship"
        assert loaded.deadline == date(2025, 1, 20)
        assert loaded.completed is True
        assert loaded.categories == (category,)

    @pytest.mark.asyncio
    async def test_delete_is_persisted(self, tmp_path):
        path = tmp_path / "store.json"
        gateway = JsonFileGateway(path)
        task = await gateway.create_task("local", TaskInput(title="Temp"))
        await gateway.delete_task(task.id)

        assert await JsonFileGateway(path).fetch_tasks("local") == []
        assert json.loads(path.read_text())["tasks"] == []

    def test_missing_file_is_empty_store(self, tmp_path):
        gateway = JsonFileGateway(tmp_path / "nested" / "store.json")
        assert gateway._tasks == {}

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        with pytest.raises(PersistenceError, match="Corrupt"):
            JsonFileGateway(path)

    def test_dangling_links_dropped(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(
            json.dumps(
                {
                    "tasks": [{"id": "t1", "user_id": "local", "title": "T"}],
                    "categories": [],
                    "task_categories": [{"task_id": "t1", "category_id": "gone"}],
                }
            )
        )
        assert JsonFileGateway(path)._links == set()

    @pytest.mark.asyncio
    async def test_failed_mutation_writes_nothing(self, tmp_path):
        path = tmp_path / "store.json"
        gateway = JsonFileGateway(path)
        with pytest.raises(PersistenceError):
            await gateway.update_task("missing", TaskUpdate(title="x"))
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_no_temporary_file_left_behind(self, tmp_path):
        path = tmp_path / "store.json"
        await JsonFileGateway(path).create_task("local", TaskInput(title="T"))
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    @pytest.mark.asyncio
    async def test_failed_write_rolls_back_memory_and_keeps_file(self, tmp_path):
        path = tmp_path / "store.json"
        gateway = JsonFileGateway(path)
        category = await gateway.create_category("local", CategoryInput(name="Work"))
        task = await gateway.create_task("local", TaskInput(title="Keep me"))
        await gateway.set_task_categories(task.id, [category.id])
        before = path.read_text()

        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError, match="disk full"):
                await gateway.update_task(task.id, TaskUpdate(title="Lost"))
            with pytest.raises(PersistenceError):
                await gateway.delete_task(task.id)
            with pytest.raises(PersistenceError):
                await gateway.delete_category(category.id)
            with pytest.raises(PersistenceError):
                await gateway.create_task("local", TaskInput(title="Never saved"))

        [current] = await gateway.fetch_tasks("local")
        assert current.title == "Keep me"
        assert current.categories == (category,)
        assert [c.id for c in await gateway.fetch_categories("local")] == [category.id]
        assert path.read_text() == before
