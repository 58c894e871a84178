"""
Shared pieces of the entity controllers: the per-process catalog context,
the two kinds of action result, and the view-model shape.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional

from catalog import parallel


@dataclass
class Catalog:
    """
    Process-wide handles every controller is constructed with.

    Args:
        store: the entity store (``catalog.store.Store``).
        executor: runs concurrent sub-queries.
        summary_lookup: isbn -> summary or None; None disables the lookup.
    """
    store: object
    executor: object
    summary_lookup: Optional[Callable] = None


@dataclass
class Render:
    """Render ``template`` with ``context`` as the view-model."""
    template: str
    context: dict = field(default_factory=dict)


@dataclass
class Redirect:
    """Send the client to ``location``; ``message`` is flashed on the next page."""
    location: str
    message: Optional[str] = None


def view(title: str, errors=None, **data) -> dict:
    """
    Build a view-model: ``{title, <data>..., errors?}``.

    ``errors`` is only present when there is something to report.
    """
    model = {"title": title, **data}
    if errors:
        model["errors"] = list(errors)
    return model


class Controller:
    """Base class; subclasses implement the list/detail/create/delete/update actions."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.store = catalog.store

    def gather(self, **calls) -> dict:
        return parallel.gather(self.catalog.executor, **calls)
