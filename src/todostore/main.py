import logging
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from .dependencies import get_loaded_view
from .logging_utils import configure_logging, reset_request_id, set_request_id
from .render import render_page
from .routers import todos as todos_router
from .settings import get_settings
from .view import TodoStoreView

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Todo store view: seed merge, editing, completion toggling and deletion.",
    },
    {"name": "pages", "description": "Server-rendered pages."},
]

_settings = get_settings()

configure_logging(_settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Todo Store",
    description="Todo list merged from a remote seed list and locally persisted items.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request_token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(request_token)
    response.headers["X-Request-ID"] = request_id
    return response


def _jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raised ValueError itself
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


# Global exception handlers for consistent JSON on validation errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    logger.info("Rejected request to %s: validation failed", request.url.path)
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": _jsonable_errors(exc),
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend}


# PUBLIC_INTERFACE
@app.get("/todo-store", summary="Todo Store Page", tags=["pages"], response_class=HTMLResponse)
def todo_store_page(view: TodoStoreView = Depends(get_loaded_view)) -> HTMLResponse:
    """
    Render the todo store page, running the initial load on first visit.
    """
    return HTMLResponse(content=render_page(view.state()))


# Include routers
app.include_router(todos_router.router)


def run() -> None:
    """Serve the app with uvicorn using HOST/PORT from settings."""
    import uvicorn

    uvicorn.run(app, host=_settings.host, port=_settings.port, log_config=None)


if __name__ == "__main__":
    run()
