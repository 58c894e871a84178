import logging
from functools import partial

from catalog.controllers.base import Controller, Redirect, Render, view
from catalog.errors import NotFoundError
from catalog.validation import AUTHOR_FIELDS, first, validate

log = logging.getLogger(__name__)

LIST_URL = "/catalog/authors"


class AuthorController(Controller):

    def list(self):
        authors = self.store.authors.find(sort="family_name")
        return Render("author_list.html", view("Author List", author_list=authors))

    def _with_books(self, author_id):
        return self.gather(
            author=partial(self.store.authors.find_by_id, author_id),
            author_books=partial(self.store.books.find, {"author": author_id}, fields=("title", "summary")),
        )

    def detail(self, author_id):
        results = self._with_books(author_id)
        if results["author"] is None:
            raise NotFoundError("Author", author_id)
        return Render("author_detail.html", view("Author Detail", **results))

    def create_get(self):
        return Render("author_form.html", view("Create Author"))

    def create_post(self, form):
        result = validate(form, AUTHOR_FIELDS)
        if not result.ok:
            return Render("author_form.html", view("Create Author", author=result.values, errors=result.errors))

        author = self.store.authors.save(result.values)
        log.info("Created author %s (%s)", author.id, author.name)
        return Redirect(author.url, f"Author '{author.name}' was added.")

    def delete_get(self, author_id):
        results = self._with_books(author_id)
        if results["author"] is None:
            return Redirect(LIST_URL)
        return Render("author_delete.html", view("Delete Author", **results))

    def delete_post(self, form):
        author_id = first(form.get("authorid"))
        results = self._with_books(author_id)

        if results["author_books"]:
            log.info("Refused to delete author %s: %d book(s) still reference it",
                     author_id, len(results["author_books"]))
            return Render("author_delete.html", view("Delete Author", **results))

        if self.store.authors.delete_by_id(author_id):
            log.info("Deleted author %s", author_id)
        return Redirect(LIST_URL)

    def update_get(self, author_id):
        author = self.store.authors.find_by_id(author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        return Render("author_form.html", view("Update Author", author=author))

    def update_post(self, author_id, form):
        result = validate(form, AUTHOR_FIELDS)
        if not result.ok:
            author = dict(result.values, id=author_id)
            return Render("author_form.html", view("Update Author", author=author, errors=result.errors))

        author = self.store.authors.update_by_id(author_id, result.values)
        if author is None:
            raise NotFoundError("Author", author_id)
        log.info("Updated author %s", author_id)
        return Redirect(author.url, f"Author '{author.name}' was updated.")
