"""FastAPI routers acting as controllers."""

from . import sessions

__all__ = ["sessions"]
