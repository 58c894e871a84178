from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy import create_engine

from catalog.app import create_app
from catalog.controllers import Catalog
from catalog.data_models import db
from catalog.store import Store


@pytest.fixture
def store(tmp_path):
    # A fresh SQLite file per test; foreign keys are switched on by Store.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'library.sqlite'}",
        connect_args={"check_same_thread": False},
    )
    store = Store(engine)
    db.metadata.create_all(engine)
    yield store
    engine.dispose()


@pytest.fixture
def executor():
    with ThreadPoolExecutor(max_workers=4) as pool:
        yield pool


@pytest.fixture
def catalog(store, executor):
    return Catalog(store=store, executor=executor)


@pytest.fixture
def author(store):
    return store.authors.save({
        "first_name": "Ursula",
        "family_name": "LeGuin",
        "date_of_birth": date(1929, 10, 21),
        "date_of_death": date(2018, 1, 22),
    })


@pytest.fixture
def genres(store):
    return [store.genres.save({"name": name}) for name in ("Fantasy", "Poetry", "Science Fiction")]


@pytest.fixture
def book(store, author, genres):
    return store.books.save({
        "title": "A Wizard of Earthsea",
        "author": author.id,
        "summary": "A young wizard on Gont.",
        "isbn": "9780547773742",
        "genre": [genres[0].id],
    })


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'web.sqlite'}",
    })
    yield app
    app.extensions["catalog"].executor.shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
