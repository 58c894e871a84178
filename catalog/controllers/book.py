import logging
from functools import partial

from catalog.controllers.base import Controller, Redirect, Render, view
from catalog.errors import NotFoundError
from catalog.validation import BOOK_FIELDS, as_list, first, validate

log = logging.getLogger(__name__)

LIST_URL = "/catalog/books"


def genre_choices(genres, selected):
    """
    Genre checkboxes for the book form; a genre is checked when its id is in ``selected``.
    """
    selected = set(selected)
    return [{"id": genre.id, "name": genre.name, "checked": genre.id in selected} for genre in genres]


class BookController(Controller):

    def list(self):
        books = self.store.books.find(fields=("title", "author"), expand=("author",), sort="title")
        return Render("book_list.html", view("Book List", book_list=books))

    def _with_instances(self, book_id, expand=()):
        return self.gather(
            book=partial(self.store.books.find_by_id, book_id, expand=expand),
            book_instances=partial(self.store.instances.find, {"book": book_id}, sort="due_back"),
        )

    def detail(self, book_id):
        results = self._with_instances(book_id, expand=("author", "genre"))
        book = results["book"]
        if book is None:
            raise NotFoundError("Book", book_id)
        return Render("book_detail.html", view(book.title, **results))

    def _form(self, title, book=None, selected=(), errors=None):
        """Render the book form with the author list and the genre checkboxes."""
        results = self.gather(
            authors=partial(self.store.authors.find, sort="family_name"),
            genres=partial(self.store.genres.find, sort="name"),
        )
        return Render("book_form.html", view(
            title,
            authors=results["authors"],
            genres=genre_choices(results["genres"], selected),
            book=book,
            errors=errors,
        ))

    def _submitted(self, form):
        form = dict(form)
        form["genre"] = as_list(form.get("genre"))
        return form

    def _lookup_summary(self, form):
        lookup = self.catalog.summary_lookup
        isbn = first(form.get("isbn")) or ""
        if lookup is None or not isbn.strip() or (first(form.get("summary")) or "").strip():
            return
        summary = lookup(isbn)
        if summary:
            log.info("Filled summary for ISBN %s from Open Library", isbn)
            form["summary"] = summary

    def create_get(self):
        return self._form("Create Book")

    def create_post(self, form):
        form = self._submitted(form)
        self._lookup_summary(form)
        result = validate(form, BOOK_FIELDS)
        if not result.ok:
            return self._form("Create Book", result.values, result.values["genre"], result.errors)

        book = self.store.books.save(result.values)
        log.info("Created book %s (%s)", book.id, book.title)
        return Redirect(book.url, f"Book '{book.title}' was added.")

    def delete_get(self, book_id):
        results = self._with_instances(book_id)
        if results["book"] is None:
            return Redirect(LIST_URL)
        return Render("book_delete.html", view("Delete Book", **results))

    def delete_post(self, form):
        book_id = first(form.get("bookid"))
        results = self._with_instances(book_id)

        if results["book_instances"]:
            log.info("Refused to delete book %s: %d copies still reference it",
                     book_id, len(results["book_instances"]))
            return Render("book_delete.html", view("Delete Book", **results))

        if self.store.books.delete_by_id(book_id):
            log.info("Deleted book %s", book_id)
        return Redirect(LIST_URL)

    def update_get(self, book_id):
        results = self.gather(
            book=partial(self.store.books.find_by_id, book_id, expand=("author", "genre")),
            authors=partial(self.store.authors.find, sort="family_name"),
            genres=partial(self.store.genres.find, sort="name"),
        )
        book = results["book"]
        if book is None:
            raise NotFoundError("Book", book_id)

        selected = [genre.id for genre in book.genre]
        return Render("book_form.html", view(
            "Update Book",
            authors=results["authors"],
            genres=genre_choices(results["genres"], selected),
            book=book,
        ))

    def update_post(self, book_id, form):
        form = self._submitted(form)
        result = validate(form, BOOK_FIELDS)
        if not result.ok:
            book = dict(result.values, id=book_id)
            return self._form("Update Book", book, result.values["genre"], result.errors)

        book = self.store.books.update_by_id(book_id, result.values)
        if book is None:
            raise NotFoundError("Book", book_id)
        log.info("Updated book %s", book_id)
        return Redirect(book.url, f"Book '{book.title}' was updated.")
