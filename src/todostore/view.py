"""
State and operations of the todo store page.

The view owns the in-memory todo list shown to the user. It is populated once
by `load()` from the seed source and the repository, and every later mutation
writes the whole list back to the repository.
"""
from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from .models import LOCAL_ID_PREFIX, TodoRecord
from .repositories import Repository
from .seed import SeedFetchError, SeedSource, to_todo

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def merge_todos(local: Sequence[TodoRecord], remote: Sequence[TodoRecord]) -> List[TodoRecord]:
    """
    Return local todos followed by the remote todos whose title is not
    already used by a local todo. Titles are compared exactly.

    Remote todos whose id is already stored locally are skipped as well, so a
    seed item renamed by the user is not added back under the same id.
    """
    local_titles = {t["title"] for t in local}
    local_ids = {t["id"] for t in local}
    return [
        *local,
        *(t for t in remote if t["title"] not in local_titles and t["id"] not in local_ids),
    ]


class TodoStoreView:
    """
    Merge-and-render view over a repository and a seed source.

    Attributes:
        items: current todo list
        error: last user-visible error message
        editing_item: todo being edited, if any
        draft_title: edit buffer for editing_item
        loaded: whether the one-shot initial load has run
    """

    def __init__(
        self,
        repository: Repository,
        seed: SeedSource,
        *,
        fallback_to_local: bool = False,
    ) -> None:
        self._repository = repository
        self._seed = seed
        self._fallback_to_local = fallback_to_local
        self._lock = RLock()

        self.items: List[TodoRecord] = []
        self.error: Optional[str] = None
        self.editing_item: Optional[TodoRecord] = None
        self.draft_title: str = ""
        self.loaded = False

    def load(self) -> None:
        """Fetch the seed list and merge it into storage. Runs only once."""
        with self._lock:
            if self.loaded:
                return
            self.loaded = True

            try:
                remote = [to_todo(r) for r in self._seed.fetch()]
            except SeedFetchError as exc:
                self.error = str(exc)
                logger.exception("Failed to load seed todos: %s", exc)
                if self._fallback_to_local:
                    self.items = self._repository.read()
                return

            merged = merge_todos(self._repository.read(), remote)
            self._repository.write(merged)
            self.items = merged
            logger.info("Loaded %d todos (%d from seed)", len(merged), len(remote))

    def find(self, todo_id: str) -> Optional[TodoRecord]:
        for todo in self.items:
            if todo["id"] == todo_id:
                return todo
        return None

    def _commit(self, items: List[TodoRecord]) -> None:
        self._repository.write(items)
        self.items = items

    def create(self, title: str) -> TodoRecord:
        """Append a new local todo and persist the list."""
        todo: TodoRecord = {"id": f"{LOCAL_ID_PREFIX}{uuid4().hex}", "title": title, "completed": False}
        with self._lock:
            self._commit([*self.items, todo])
        return todo

    def edit(self, todo: TodoRecord) -> None:
        with self._lock:
            self.editing_item = todo
            self.draft_title = todo["title"]

    def set_draft(self, title: str) -> bool:
        """Replace the edit buffer. Returns False, leaving it untouched, when no edit is in progress."""
        with self._lock:
            if self.editing_item is None:
                return False
            self.draft_title = title
            return True

    def save_edit(self) -> None:
        """Write the edit buffer into the todo being edited. No-op when not editing."""
        with self._lock:
            if self.editing_item is None:
                return
            editing_id = self.editing_item["id"]
            self._commit(
                [{**t, "title": self.draft_title} if t["id"] == editing_id else t for t in self.items]
            )
            self.cancel_edit()

    def cancel_edit(self) -> None:
        with self._lock:
            self.editing_item = None
            self.draft_title = ""

    def toggle_completed(self, todo_id: str) -> Optional[TodoRecord]:
        """Flip the completed flag of a todo. Returns the updated todo, or None if not found."""
        with self._lock:
            if self.find(todo_id) is None:
                return None
            self._commit(
                [{**t, "completed": not t["completed"]} if t["id"] == todo_id else t for t in self.items]
            )
            return self.find(todo_id)

    def delete(self, todo_id: str) -> bool:
        """Remove a todo. Returns False if no todo has this id."""
        with self._lock:
            remaining = [t for t in self.items if t["id"] != todo_id]
            if len(remaining) == len(self.items):
                return False
            self._commit(remaining)
            if self.editing_item is not None and self.editing_item["id"] == todo_id:
                self.cancel_edit()
            return True

    def state(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "items": [t.copy() for t in self.items],
                "error": self.error,
                "editing_item": None if self.editing_item is None else self.editing_item.copy(),
                "draft_title": self.draft_title,
                "loaded": self.loaded,
            }
