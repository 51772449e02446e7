"""FastAPI routers acting as controllers in the MVC architecture."""

from . import pages, schools

__all__ = ["pages", "schools"]
