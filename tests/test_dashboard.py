import pytest

from catalog.controllers.dashboard import DashboardController
from catalog.errors import StoreFailure


@pytest.fixture
def stocked(store, author, genres):
    books = [
        store.books.save({"title": f"Book {n}", "author": author.id, "summary": "s", "isbn": str(n), "genre": []})
        for n in range(10)
    ]
    statuses = ["Available"] * 3 + ["Loaned", "Maintenance", "Reserved", "Loaned"]
    for book, status in zip(books, statuses):
        store.instances.save({"book": book.id, "imprint": "Ace", "status": status})
    return store


def test_counts(catalog, stocked):
    result = DashboardController(catalog).index()

    assert result.template == "index.html"
    assert result.context["title"] == "Local Library Home"
    assert result.context["data"] == {
        "book_count": 10,
        "book_instance_count": 7,
        "book_instance_available_count": 3,
        "author_count": 1,
        "genre_count": 3,
    }


def test_one_failing_count_fails_the_page(catalog, stocked, monkeypatch):
    count = stocked.instances.count

    def failing_count(where=None):
        if where:
            raise StoreFailure("book_instances: connection lost")
        return count(where)

    monkeypatch.setattr(stocked.instances, "count", failing_count)

    with pytest.raises(StoreFailure, match="connection lost"):
        DashboardController(catalog).index()
