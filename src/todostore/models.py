from __future__ import annotations

from typing import TypedDict

EXTERNAL_ID_PREFIX = "external-"
LOCAL_ID_PREFIX = "local-"


# PUBLIC_INTERFACE
class TodoRecord(TypedDict):
    """
    A single todo as it is held by the view and persisted in the storage slot.

    Fields:
    - id: Unique string identifier; 'external-<n>' for seed items, 'local-<hex>' otherwise
    - title: Free text, also the de-duplication key when merging seed items
    - completed: Boolean completion flag
    """

    id: str
    title: str
    completed: bool
