import uuid
from datetime import date

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

STATUS_CHOICES = ("Available", "Maintenance", "Loaned", "Reserved")


def new_id() -> str:
    return uuid.uuid4().hex


def format_date(value) -> str:
    """
    Format a date the way list and detail pages show it ('October 19th, 2026').

    Returns:
        str: the formatted date, or an empty string for a missing date.
    """
    if value is None:
        return ""
    if 11 <= value.day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(value.day % 10, "th")
    return f"{value.strftime('%B')} {value.day}{suffix}, {value.year}"


book_genre = db.Table(
    "book_genre",
    db.Column("book_id", db.String(32), db.ForeignKey("books.id"), primary_key=True),
    db.Column("genre_id", db.String(32), db.ForeignKey("genres.id"), primary_key=True),
)


class Author(db.Model):
    """
    Author model storing names and optional life dates.
    """
    __tablename__ = 'authors'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=True)
    date_of_death = db.Column(db.Date, nullable=True)

    @property
    def name(self) -> str:
        """'family_name, first_name', or '' when either part is missing."""
        if not self.first_name or not self.family_name:
            return ""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        return f"{format_date(self.date_of_birth)} - {format_date(self.date_of_death)}"

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    def __repr__(self):
        return f"Author(id = {self.id}, name = {self.name})"

    def __str__(self):
        return self.name


class Genre(db.Model):
    __tablename__ = 'genres'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    # Stored escaped; one character can expand to five (&#39;).
    name = db.Column(db.String(500), nullable=False)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def __repr__(self):
        return f"<Genre id={self.id} name='{self.name}'>"

    def __str__(self):
        return self.name


class Book(db.Model):
    """
    Book model storing title, summary, ISBN, its author and its genres.

    The author and genre references are only loaded when a query asks for
    them to be expanded; touching an unexpanded reference raises.
    """
    __tablename__ = 'books'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.Text, nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.Text, nullable=False)

    author_id = db.Column(db.String(32), db.ForeignKey("authors.id"), nullable=False)
    author = db.relationship("Author", lazy="raise")
    genre = db.relationship("Genre", secondary=book_genre, lazy="raise", order_by="Genre.name")

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"

    def __repr__(self):
        return f"<Book id={self.id} title='{self.title}'>"

    def __str__(self):
        return self.title


class BookInstance(db.Model):
    """
    A physical copy of a book, with its lending status.
    """
    __tablename__ = 'book_instances'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    book_id = db.Column(db.String(32), db.ForeignKey("books.id"), nullable=False)
    imprint = db.Column(db.Text, nullable=False)
    status = db.Column(
        db.Enum(*STATUS_CHOICES, name="book_status", create_constraint=True),
        nullable=False,
        default="Maintenance",
    )
    due_back = db.Column(db.Date, nullable=False, default=date.today)

    book = db.relationship("Book", lazy="raise")

    @property
    def available(self) -> bool:
        return self.status == "Available"

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    def __repr__(self):
        return f"<BookInstance id={self.id} status='{self.status}'>"
