from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..dependencies import get_loaded_view
from ..schemas import DraftUpdate, TodoCreate, TodoOut, ViewState
from ..view import TodoStoreView

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=ViewState,
    summary="Get Todo Store",
    description="Return the todo list together with the current error and edit state.",
)
def get_state(view: TodoStoreView = Depends(get_loaded_view)) -> ViewState:
    """
    Current view state.
    """
    return ViewState(**view.state())


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Append a new local Todo item and return it.",
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, view: TodoStoreView = Depends(get_loaded_view)) -> TodoOut:
    created = view.create(payload.title)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/draft",
    response_model=ViewState,
    summary="Update Edit Draft",
    description="Replace the edit buffer of the todo currently being edited.",
    responses={
        200: {"description": "Draft updated"},
        409: {"description": "No todo is being edited"},
    },
)
def update_draft(payload: DraftUpdate, view: TodoStoreView = Depends(get_loaded_view)) -> ViewState:
    if not view.set_draft(payload.title):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No todo is being edited")
    return ViewState(**view.state())


# PUBLIC_INTERFACE
@router.post(
    "/draft/save",
    response_model=ViewState,
    summary="Save Edit",
    description="Apply the edit buffer to the todo being edited. Does nothing when no edit is in progress.",
)
def save_edit(view: TodoStoreView = Depends(get_loaded_view)) -> ViewState:
    view.save_edit()
    return ViewState(**view.state())


# PUBLIC_INTERFACE
@router.post(
    "/draft/cancel",
    response_model=ViewState,
    summary="Cancel Edit",
    description="Leave edit mode without changing any todo.",
)
def cancel_edit(view: TodoStoreView = Depends(get_loaded_view)) -> ViewState:
    view.cancel_edit()
    return ViewState(**view.state())


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/edit",
    response_model=ViewState,
    summary="Start Edit",
    description="Enter edit mode for a todo; the edit buffer starts with its current title.",
    responses={
        200: {"description": "Edit started"},
        404: {"description": "Todo not found"},
    },
)
def start_edit(todo_id: str, view: TodoStoreView = Depends(get_loaded_view)) -> ViewState:
    todo = view.find(todo_id)
    if todo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    view.edit(todo)
    return ViewState(**view.state())


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/toggle",
    response_model=TodoOut,
    summary="Toggle Completed",
    description="Flip the completed flag of a todo.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
    },
)
def toggle_completed(todo_id: str, view: TodoStoreView = Depends(get_loaded_view)) -> TodoOut:
    updated = view.toggle_completed(todo_id)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(todo_id: str, view: TodoStoreView = Depends(get_loaded_view)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not view.delete(todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
