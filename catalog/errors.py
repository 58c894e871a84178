"""Failure conditions raised by the catalog core and mapped to responses by the app."""


class CatalogError(Exception):
    """Base class for catalog failures; ``status`` is the HTTP status the app responds with."""

    status = 500


class NotFoundError(CatalogError):
    """The entity a detail or update page asked for does not exist."""

    status = 404

    def __init__(self, kind: str, entity_id):
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id


class StoreFailure(CatalogError):
    """The store could not complete an operation (connectivity, constraint, ...)."""

    status = 500
