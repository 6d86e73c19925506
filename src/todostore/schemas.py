from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new local Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
            }
        }
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        if v is None:
            raise ValueError("title is required")
        s = v.strip()
        if not (1 <= len(s) <= 200):
            raise ValueError("title length must be between 1 and 200 characters")
        return s


# PUBLIC_INTERFACE
class DraftUpdate(BaseModel):
    """
    Schema for replacing the edit buffer of the todo currently being edited.
    The buffer is saved verbatim, so no trimming is applied.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
            }
        }
    )

    title: str = Field(..., description="New title for the todo being edited")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item. Also used to validate
    persisted records when they are read back from storage.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "external-1",
                "title": "delectus aut autem",
                "completed": False,
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")


class RemoteTodo(BaseModel):
    """
    One entry of the remote seed list. Unknown fields (e.g. userId) are ignored.
    """

    id: int
    title: str
    completed: bool


# PUBLIC_INTERFACE
class ViewState(BaseModel):
    """
    Snapshot of the todo store view.
    """

    items: List[TodoOut] = Field(..., description="Current todo list, in display order")
    error: Optional[str] = Field(default=None, description="Last user-visible error, if any")
    editing_item: Optional[TodoOut] = Field(default=None, description="Todo currently being edited")
    draft_title: str = Field(default="", description="Edit buffer for the todo being edited")
    loaded: bool = Field(..., description="Whether the initial load has run")
