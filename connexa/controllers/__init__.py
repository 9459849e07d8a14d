"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, courses, groups, users

__all__ = ["auth", "courses", "groups", "users"]
