"""
Request handlers for the catalog, one controller per entity kind plus the dashboard.
"""
from catalog.controllers.author import AuthorController
from catalog.controllers.base import Catalog, Redirect, Render
from catalog.controllers.book import BookController
from catalog.controllers.bookinstance import BookInstanceController
from catalog.controllers.dashboard import DashboardController
from catalog.controllers.genre import GenreController


def build_controllers(catalog: Catalog) -> dict:
    """One controller per URL kind, all sharing ``catalog``."""
    return {
        "dashboard": DashboardController(catalog),
        "author": AuthorController(catalog),
        "book": BookController(catalog),
        "genre": GenreController(catalog),
        "bookinstance": BookInstanceController(catalog),
    }


__all__ = [
    "Catalog",
    "Redirect",
    "Render",
    "build_controllers",
]
