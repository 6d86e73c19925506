import logging
from typing import List

from src.todostore.db import SQLiteRepository
from src.todostore.repositories import InMemoryRepository
from src.todostore.schemas import RemoteTodo
from src.todostore.seed import SeedFetchError, SeedSource
from src.todostore.view import TodoStoreView, merge_todos


class StaticSeed(SeedSource):
    """Seed source returning a fixed list and counting calls."""

    def __init__(self, todos=None, error=None):
        self.todos = todos or []
        self.error = error
        self.calls = 0

    def fetch(self) -> List[RemoteTodo]:
        self.calls += 1
        if self.error is not None:
            raise SeedFetchError(self.error)
        return [RemoteTodo(**t) for t in self.todos]


def remote(count=10):
    return [{"id": i, "title": f"T{i}", "completed": False} for i in range(1, count + 1)]


def rec(id_, title, completed=False):
    return {"id": id_, "title": title, "completed": completed}


class TestMerge:
    def test_local_first_then_new_remote(self):
        local = [rec("a", "A"), rec("b", "B")]
        incoming = [rec("external-1", "B"), rec("external-2", "C"), rec("external-3", "A")]
        merged = merge_todos(local, incoming)
        assert merged == [rec("a", "A"), rec("b", "B"), rec("external-2", "C")]

    def test_empty_remote_is_identity(self):
        local = [rec("a", "A", True), rec("b", "B")]
        assert merge_todos(local, []) == local

    def test_titles_compared_case_sensitively(self):
        merged = merge_todos([rec("a", "Milk")], [rec("external-1", "milk")])
        assert [t["id"] for t in merged] == ["a", "external-1"]

    def test_every_local_kept_once(self):
        local = [rec("a", "X"), rec("b", "X")]
        merged = merge_todos(local, [rec("external-1", "X")])
        assert merged == local

    def test_remote_with_known_id_skipped(self):
        local = [rec("external-1", "renamed")]
        merged = merge_todos(local, [rec("external-1", "T1"), rec("external-2", "T2")])
        assert [t["id"] for t in merged] == ["external-1", "external-2"]
        assert merged[0]["title"] == "renamed"


class TestLoad:
    def test_empty_storage_takes_seed(self):
        repo = InMemoryRepository()
        view = TodoStoreView(repo, StaticSeed(remote()))
        view.load()
        assert [t["id"] for t in view.items] == [f"external-{i}" for i in range(1, 11)]
        assert repo.read() == view.items
        assert view.error is None

    def test_local_duplicate_wins(self):
        repo = InMemoryRepository()
        repo.write([rec("x", "A", True)])
        seed = StaticSeed([{"id": 1, "title": "A", "completed": False}, {"id": 2, "title": "B", "completed": False}])
        view = TodoStoreView(repo, seed)
        view.load()
        titled_a = [t for t in view.items if t["title"] == "A"]
        assert titled_a == [rec("x", "A", True)]
        assert [t["id"] for t in view.items] == ["x", "external-2"]

    def test_load_runs_once(self):
        seed = StaticSeed(remote(2))
        view = TodoStoreView(InMemoryRepository(), seed)
        view.load()
        view.load()
        assert seed.calls == 1
        assert view.loaded is True

    def test_fetch_failure_keeps_items_empty(self):
        repo = InMemoryRepository()
        repo.write([rec("x", "A")])
        view = TodoStoreView(repo, StaticSeed(error="Network response was not ok"))
        view.load()
        assert view.error == "Network response was not ok"
        assert view.items == []
        # Storage is left as it was
        assert repo.read() == [rec("x", "A")]

    def test_fetch_failure_with_local_fallback(self):
        repo = InMemoryRepository()
        repo.write([rec("x", "A")])
        view = TodoStoreView(repo, StaticSeed(error="boom"), fallback_to_local=True)
        view.load()
        assert view.error == "boom"
        assert view.items == [rec("x", "A")]

    def test_fetch_failure_logged_with_traceback(self, caplog):
        caplog.set_level(logging.ERROR, logger="src.todostore.view")
        view = TodoStoreView(InMemoryRepository(), StaticSeed(error="boom"))
        view.load()
        errors = [r for r in caplog.records if r.name == "src.todostore.view" and r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        assert isinstance(errors[0].exc_info[1], SeedFetchError)

    def test_renamed_seed_item_not_duplicated_on_reload(self, tmp_path):
        path = str(tmp_path / "todos.db")
        first = TodoStoreView(SQLiteRepository(path), StaticSeed(remote(3)))
        first.load()
        first.edit(first.find("external-1"))
        first.set_draft("renamed")
        first.save_edit()

        # A fresh view over the same storage, seed still serving the old title
        second = TodoStoreView(SQLiteRepository(path), StaticSeed(remote(3)))
        second.load()
        ids = [t["id"] for t in second.items]
        assert ids == ["external-1", "external-2", "external-3"]
        assert second.find("external-1")["title"] == "renamed"

        second.toggle_completed("external-1")
        assert [t["completed"] for t in second.items] == [True, False, False]


class TestMutations:
    def make_view(self):
        repo = InMemoryRepository()
        view = TodoStoreView(repo, StaticSeed(remote(3)))
        view.load()
        return view, repo

    def test_toggle_twice_restores(self):
        view, repo = self.make_view()
        before = [t.copy() for t in view.items]
        assert view.toggle_completed("external-2")["completed"] is True
        assert repo.read()[1]["completed"] is True
        view.toggle_completed("external-2")
        assert view.items == before
        assert repo.read() == before

    def test_toggle_unknown_id(self):
        view, repo = self.make_view()
        before = [t.copy() for t in view.items]
        assert view.toggle_completed("missing") is None
        assert view.items == before

    def test_delete_removes_and_persists(self):
        view, repo = self.make_view()
        assert view.delete("external-1") is True
        assert [t["id"] for t in view.items] == ["external-2", "external-3"]
        assert repo.read() == view.items

    def test_delete_unknown_id(self):
        view, repo = self.make_view()
        before = [t.copy() for t in view.items]
        assert view.delete("missing") is False
        assert view.items == before
        assert repo.read() == before

    def test_edit_save(self):
        view, repo = self.make_view()
        view.edit(view.items[0])
        assert view.draft_title == "T1"
        view.set_draft("Renamed")
        view.save_edit()
        assert view.items[0]["title"] == "Renamed"
        assert repo.read()[0]["title"] == "Renamed"
        assert view.editing_item is None
        assert view.draft_title == ""

    def test_save_without_edit_is_noop(self):
        view, repo = self.make_view()
        before = [t.copy() for t in view.items]
        assert view.set_draft("ignored") is False
        assert view.draft_title == ""
        view.save_edit()
        assert view.items == before

    def test_cancel_keeps_items(self):
        view, repo = self.make_view()
        before = [t.copy() for t in view.items]
        view.edit(view.items[1])
        view.set_draft("ignored")
        view.cancel_edit()
        assert view.items == before
        assert view.editing_item is None

    def test_delete_edited_todo_ends_edit(self):
        view, repo = self.make_view()
        view.edit(view.items[0])
        view.delete("external-1")
        assert view.editing_item is None

    def test_create_appends_local(self):
        view, repo = self.make_view()
        todo = view.create("New")
        assert todo["id"].startswith("local-")
        assert view.items[-1] == todo
        assert repo.read()[-1] == todo
        assert len({t["id"] for t in view.items}) == len(view.items)

    def test_state_snapshot(self):
        view, repo = self.make_view()
        view.edit(view.items[0])
        state = view.state()
        assert state["loaded"] is True
        assert state["editing_item"]["id"] == "external-1"
        # Snapshot is detached from the view
        state["items"][0]["title"] = "changed"
        assert view.items[0]["title"] == "T1"
