import logging
from functools import partial

from catalog.controllers.base import Controller, Redirect, Render, view
from catalog.errors import NotFoundError
from catalog.validation import GENRE_FIELDS, first, validate

log = logging.getLogger(__name__)

LIST_URL = "/catalog/genres"


class GenreController(Controller):

    def list(self):
        genres = self.store.genres.find(sort="name")
        return Render("genre_list.html", view("Genre List", genre_list=genres))

    def _with_books(self, genre_id):
        return self.gather(
            genre=partial(self.store.genres.find_by_id, genre_id),
            genre_books=partial(self.store.books.find, {"genre": genre_id}, sort="title"),
        )

    def detail(self, genre_id):
        results = self._with_books(genre_id)
        if results["genre"] is None:
            raise NotFoundError("Genre", genre_id)
        return Render("genre_detail.html", view("Genre Detail", **results))

    def create_get(self):
        return Render("genre_form.html", view("Create Genre"))

    def create_post(self, form):
        result = validate(form, GENRE_FIELDS)
        if not result.ok:
            return Render("genre_form.html", view("Create Genre", genre=result.values, errors=result.errors))

        # A genre with this exact name already exists: show it instead of adding a duplicate.
        existing = self.store.genres.find({"name": result.values["name"]})
        if existing:
            return Redirect(existing[0].url)

        genre = self.store.genres.save(result.values)
        log.info("Created genre %s (%s)", genre.id, genre.name)
        return Redirect(genre.url, f"Genre '{genre.name}' was added.")

    def delete_get(self, genre_id):
        results = self._with_books(genre_id)
        if results["genre"] is None:
            return Redirect(LIST_URL)
        return Render("genre_delete.html", view("Delete Genre", **results))

    def delete_post(self, form):
        genre_id = first(form.get("genreid"))
        results = self._with_books(genre_id)

        if results["genre_books"]:
            log.info("Refused to delete genre %s: %d book(s) still reference it",
                     genre_id, len(results["genre_books"]))
            return Render("genre_delete.html", view("Delete Genre", **results))

        if self.store.genres.delete_by_id(genre_id):
            log.info("Deleted genre %s", genre_id)
        return Redirect(LIST_URL)

    def update_get(self, genre_id):
        genre = self.store.genres.find_by_id(genre_id)
        if genre is None:
            raise NotFoundError("Genre", genre_id)
        return Render("genre_form.html", view("Update Genre", genre=genre))

    def update_post(self, genre_id, form):
        result = validate(form, GENRE_FIELDS)
        if not result.ok:
            genre = dict(result.values, id=genre_id)
            return Render("genre_form.html", view("Update Genre", genre=genre, errors=result.errors))

        genre = self.store.genres.update_by_id(genre_id, result.values)
        if genre is None:
            raise NotFoundError("Genre", genre_id)
        log.info("Updated genre %s", genre_id)
        return Redirect(genre.url, f"Genre '{genre.name}' was updated.")
