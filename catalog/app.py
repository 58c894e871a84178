"""
Local Library - a server-rendered library catalog built with Flask and SQLAlchemy.

Features:
- Authors, books, genres and book copies, each with list, detail, create,
  update and delete pages
- Home page with catalog counts
- Authors and genres (and books with copies) cannot be deleted while
  something still references them
- Optional book summary lookup on Open Library by ISBN
"""
import atexit
import os
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from flask import Blueprint, Flask, flash, redirect, render_template, request, url_for

from catalog.config import DefaultConfig
from catalog.controllers import Catalog, Render, build_controllers
from catalog.data_models import db
from catalog.errors import NotFoundError, StoreFailure
from catalog.openlibrary import fetch_summary_by_isbn
from catalog.store import Store

# (URL kind, URL plural) for each entity.
KINDS = (
    ("author", "authors"),
    ("book", "books"),
    ("genre", "genres"),
    ("bookinstance", "bookinstances"),
)


def form_data() -> dict:
    """
    The request body as a plain mapping: a key sent once maps to its value,
    a key sent several times maps to the list of its values.
    """
    return {key: values[0] if len(values) == 1 else values for key, values in request.form.lists()}


def respond(result):
    """Turn a controller result into a Flask response."""
    if isinstance(result, Render):
        return render_template(result.template, **result.context)
    if result.message:
        flash(result.message, "success")
    return redirect(result.location)


def _register_kind(bp: Blueprint, kind: str, plural: str, controller):
    """Add the list/detail/create/delete/update routes for one entity kind."""

    def listing():
        return respond(controller.list())

    def detail(entity_id):
        return respond(controller.detail(entity_id))

    def create():
        if request.method == "POST":
            return respond(controller.create_post(form_data()))
        return respond(controller.create_get())

    def delete(entity_id):
        # The entity to delete is named by the form body, not by the path.
        if request.method == "POST":
            return respond(controller.delete_post(form_data()))
        return respond(controller.delete_get(entity_id))

    def update(entity_id):
        if request.method == "POST":
            return respond(controller.update_post(entity_id, form_data()))
        return respond(controller.update_get(entity_id))

    bp.add_url_rule(f"/{kind}/create", f"{kind}_create", create, methods=["GET", "POST"])
    bp.add_url_rule(f"/{kind}/<entity_id>/delete", f"{kind}_delete", delete, methods=["GET", "POST"])
    bp.add_url_rule(f"/{kind}/<entity_id>/update", f"{kind}_update", update, methods=["GET", "POST"])
    bp.add_url_rule(f"/{kind}/<entity_id>", f"{kind}_detail", detail)
    bp.add_url_rule(f"/{plural}", f"{kind}_list", listing)


def create_blueprint(controllers: dict) -> Blueprint:
    bp = Blueprint("catalog", __name__, url_prefix="/catalog")

    @bp.route("/")
    def index():
        """
        Homepage: counts of books, copies (all and available), authors and genres.
        """
        return respond(controllers["dashboard"].index())

    for kind, plural in KINDS:
        _register_kind(bp, kind, plural, controllers[kind])
    return bp


def _register_error_handlers(app: Flask):

    @app.errorhandler(NotFoundError)
    def not_found(error):
        return render_template("error.html", title="Not Found", message=str(error)), error.status

    @app.errorhandler(StoreFailure)
    def store_failure(error):
        app.logger.exception("Store failure while handling %s %s", request.method, request.path)
        return render_template(
            "error.html",
            title="Error",
            message="Something went wrong. Please try again later.",
        ), error.status


def create_app(test_config=None):
    """
    Application factory.

    Args:
        test_config (dict): settings applied last, over defaults and environment.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(DefaultConfig)
    app.config.from_prefixed_env()
    if test_config:
        app.config.from_mapping(test_config)

    os.makedirs(app.instance_path, exist_ok=True)

    # Pages query SQLite from worker threads.
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        options = dict(app.config["SQLALCHEMY_ENGINE_OPTIONS"])
        options.setdefault("connect_args", {"check_same_thread": False})
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options

    db.init_app(app)
    with app.app_context():
        store = Store(db.engine)
        db.create_all()

    lookup = None
    if app.config["SUMMARY_LOOKUP"]:
        lookup = partial(fetch_summary_by_isbn, timeout=app.config["OPENLIBRARY_TIMEOUT"])

    executor = ThreadPoolExecutor(max_workers=app.config["QUERY_WORKERS"], thread_name_prefix="catalog-query")
    atexit.register(executor.shutdown, wait=False)

    catalog = Catalog(store=store, executor=executor, summary_lookup=lookup)
    app.extensions["catalog"] = catalog
    app.register_blueprint(create_blueprint(build_controllers(catalog)))

    @app.route("/")
    def home():
        return redirect(url_for("catalog.index"))

    _register_error_handlers(app)
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
