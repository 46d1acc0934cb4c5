"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from pagehub.api import app

    uvicorn pagehub.api:app --reload
"""

from pagehub.api.app import app

__all__ = ["app"]
