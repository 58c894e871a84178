"""
Default settings. Any of them can be overridden with a ``FLASK_``-prefixed
environment variable (``FLASK_SQLALCHEMY_DATABASE_URI=...``) or by the mapping
passed to ``create_app``.
"""


class DefaultConfig:
    SECRET_KEY = "dev-secret-key"           # For flash messages (dev only).

    # Relative SQLite paths live in the instance folder.
    SQLALCHEMY_DATABASE_URI = "sqlite:///library.sqlite"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Worker threads for the queries a page issues side by side.
    QUERY_WORKERS = 8

    # Pre-fill an empty book summary from Open Library when an ISBN is given.
    SUMMARY_LOOKUP = False
    OPENLIBRARY_TIMEOUT = 8
