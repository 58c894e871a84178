import logging
from functools import partial

from catalog.controllers.base import Controller, Render, view

log = logging.getLogger(__name__)


class DashboardController(Controller):

    def index(self):
        """
        Home page counts. All five are queried at once; if any of them fails the
        page fails with it.
        """
        store = self.store
        counts = self.gather(
            book_count=store.books.count,
            book_instance_count=store.instances.count,
            book_instance_available_count=partial(store.instances.count, {"status": "Available"}),
            author_count=store.authors.count,
            genre_count=store.genres.count,
        )
        log.info("Catalog counts: %s", counts)
        return Render("index.html", view("Local Library Home", data=counts))
