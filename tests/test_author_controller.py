import pytest

from catalog.controllers import Redirect, Render
from catalog.controllers.author import AuthorController
from catalog.errors import NotFoundError


@pytest.fixture
def controller(catalog):
    return AuthorController(catalog)


def test_list_is_sorted_by_family_name(controller, store):
    store.authors.save({"first_name": "Isaac", "family_name": "Asimov"})
    store.authors.save({"first_name": "Frank", "family_name": "Herbert"})
    store.authors.save({"first_name": "Iain", "family_name": "Banks"})

    result = controller.list()

    assert result.template == "author_list.html"
    assert result.context["title"] == "Author List"
    assert [a.family_name for a in result.context["author_list"]] == ["Asimov", "Banks", "Herbert"]


def test_detail_shows_the_authors_books(controller, author, book):
    result = controller.detail(author.id)

    assert result.template == "author_detail.html"
    assert result.context["author"].id == author.id
    assert [b.title for b in result.context["author_books"]] == ["A Wizard of Earthsea"]
    assert "errors" not in result.context


def test_detail_of_missing_author(controller):
    with pytest.raises(NotFoundError) as excinfo:
        controller.detail("0" * 32)
    assert excinfo.value.status == 404


def test_create_with_errors_persists_nothing(controller, store):
    result = controller.create_post({"first_name": "John123", "family_name": ""})

    assert isinstance(result, Render)
    assert result.template == "author_form.html"
    messages = [(e.field, e.message) for e in result.context["errors"]]
    assert messages == [("family_name", "Family name must be specified.")]
    assert result.context["author"]["first_name"] == "John123"
    assert store.authors.count() == 0


def test_create_redirects_to_the_new_author(controller, store):
    result = controller.create_post({
        "first_name": "Frank",
        "family_name": "Herbert",
        "date_of_birth": "1920-10-08",
        "date_of_death": "",
    })

    assert isinstance(result, Redirect)
    (author,) = store.authors.find()
    assert result.location == f"/catalog/author/{author.id}"
    assert author.name == "Herbert, Frank"
    assert author.date_of_death is None


def test_delete_get_for_missing_author_goes_back_to_the_list(controller):
    assert controller.delete_get("0" * 32) == Redirect("/catalog/authors")


def test_delete_get_lists_blocking_books(controller, author, book):
    result = controller.delete_get(author.id)

    assert result.template == "author_delete.html"
    assert [b.id for b in result.context["author_books"]] == [book.id]


def test_delete_is_refused_while_books_reference_the_author(controller, store, author, book):
    result = controller.delete_post({"authorid": author.id})

    assert isinstance(result, Render)
    assert result.template == "author_delete.html"
    assert result.context["title"] == "Delete Author"
    assert [b.id for b in result.context["author_books"]] == [book.id]
    assert store.authors.find_by_id(author.id) is not None
    assert store.books.find_by_id(book.id).title == "A Wizard of Earthsea"


def test_delete_twice(controller, store, author):
    assert controller.delete_post({"authorid": author.id}) == Redirect("/catalog/authors")
    assert store.authors.find_by_id(author.id) is None

    assert controller.delete_post({"authorid": author.id}) == Redirect("/catalog/authors")


def test_update_get(controller, author):
    result = controller.update_get(author.id)

    assert result.context["title"] == "Update Author"
    assert result.context["author"].id == author.id


def test_update_get_of_missing_author(controller):
    with pytest.raises(NotFoundError):
        controller.update_get("0" * 32)


def test_update_keeps_the_identifier(controller, store, author):
    result = controller.update_post(author.id, {"first_name": "Ursula", "family_name": "KLeGuin"})

    assert result.location == author.url
    assert store.authors.count() == 1
    updated = store.authors.find_by_id(author.id)
    assert updated.family_name == "KLeGuin"
    assert updated.date_of_birth is None


def test_update_with_errors_echoes_the_submission(controller, store, author):
    result = controller.update_post(author.id, {"first_name": "", "family_name": "LeGuin"})

    assert result.template == "author_form.html"
    assert result.context["author"]["id"] == author.id
    assert [e.message for e in result.context["errors"]] == ["First name must be specified."]
    assert store.authors.find_by_id(author.id).first_name == "Ursula"


def test_update_of_vanished_author(controller):
    with pytest.raises(NotFoundError):
        controller.update_post("0" * 32, {"first_name": "Ursula", "family_name": "LeGuin"})
