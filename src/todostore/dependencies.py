"""Shared FastAPI dependencies."""

from __future__ import annotations

from threading import Lock
from typing import Optional

from fastapi import Depends

from .repositories import get_repository
from .seed import HttpSeedSource
from .settings import get_settings
from .view import TodoStoreView

_view: Optional[TodoStoreView] = None
_view_lock = Lock()


# PUBLIC_INTERFACE
def get_view() -> TodoStoreView:
    """Return the process-wide todo store view, building it from settings on first use."""
    global _view
    with _view_lock:
        if _view is None:
            settings = get_settings()
            _view = TodoStoreView(
                get_repository(),
                HttpSeedSource.from_settings(settings),
                fallback_to_local=settings.local_fallback_on_seed_error,
            )
        return _view


def reset_view() -> None:
    """Drop the process-wide view so the next request builds a fresh one (testing helper)."""
    global _view
    with _view_lock:
        _view = None


# PUBLIC_INTERFACE
def get_loaded_view(view: TodoStoreView = Depends(get_view)) -> TodoStoreView:
    """Return the view after its one-shot initial load."""
    view.load()
    return view
