"""
Todo Store package.

The FastAPI application lives in `src.todostore.main:app`; the view and its
storage can be used without it.
"""
