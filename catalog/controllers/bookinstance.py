import logging
from datetime import date

from catalog.controllers.base import Controller, Redirect, Render, view
from catalog.data_models import STATUS_CHOICES
from catalog.errors import NotFoundError
from catalog.validation import BOOK_INSTANCE_FIELDS, first, validate

log = logging.getLogger(__name__)

LIST_URL = "/catalog/bookinstances"


class BookInstanceController(Controller):

    def list(self):
        instances = self.store.instances.find(expand=("book",), sort="due_back")
        return Render("bookinstance_list.html", view("Book Instance List", bookinstance_list=instances))

    def detail(self, instance_id):
        instance = self.store.instances.find_by_id(instance_id, expand=("book",))
        if instance is None:
            raise NotFoundError("Book copy", instance_id)
        return Render("bookinstance_detail.html", view(f"Copy: {instance.book.title}", bookinstance=instance))

    def _form(self, title, bookinstance=None, errors=None):
        books = self.store.books.find(fields=("title",), sort="title")
        return Render("bookinstance_form.html", view(
            title,
            book_list=books,
            statuses=STATUS_CHOICES,
            bookinstance=bookinstance,
            errors=errors,
        ))

    def _validated(self, form):
        result = validate(form, BOOK_INSTANCE_FIELDS)
        # An absent due date falls back to today.
        if result.values["due_back"] is None:
            result.values["due_back"] = date.today()
        return result

    def create_get(self):
        return self._form("Create BookInstance")

    def create_post(self, form):
        result = self._validated(form)
        if not result.ok:
            return self._form("Create BookInstance", result.values, result.errors)

        instance = self.store.instances.save(result.values)
        log.info("Created book copy %s of book %s", instance.id, instance.book_id)
        return Redirect(instance.url, "Book copy was added.")

    def delete_get(self, instance_id):
        instance = self.store.instances.find_by_id(instance_id, expand=("book",))
        if instance is None:
            return Redirect(LIST_URL)
        return Render("bookinstance_delete.html", view("Delete BookInstance", bookinstance=instance))

    def delete_post(self, form):
        instance_id = first(form.get("bookinstanceid"))
        if self.store.instances.delete_by_id(instance_id):
            log.info("Deleted book copy %s", instance_id)
        return Redirect(LIST_URL)

    def update_get(self, instance_id):
        instance = self.store.instances.find_by_id(instance_id)
        if instance is None:
            raise NotFoundError("Book copy", instance_id)
        return self._form("Update BookInstance", instance)

    def update_post(self, instance_id, form):
        result = self._validated(form)
        if not result.ok:
            return self._form("Update BookInstance", dict(result.values, id=instance_id), result.errors)

        instance = self.store.instances.update_by_id(instance_id, result.values)
        if instance is None:
            raise NotFoundError("Book copy", instance_id)
        log.info("Updated book copy %s", instance_id)
        return Redirect(instance.url, "Book copy was updated.")
