"""
Validation and sanitization of submitted form fields.

Each entity declares a ruleset: an ordered tuple of ``Field`` declarations.
``validate`` runs every field through the same pipeline

    trim -> required check -> constraint checks -> conversion -> escaping

and collects a ``FieldError`` for every failed step instead of stopping at the
first one, so a single submission reports all of its problems at once.
"""
import re
from dataclasses import dataclass, field as dataclass_field
from datetime import datetime
from typing import Callable, Optional

from markupsafe import escape

from catalog.data_models import STATUS_CHOICES

ALPHANUMERIC = re.compile(r"^[A-Za-z0-9]+$")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class Field:
    """
    How one submitted field is checked and normalized.

    Args:
        name: form field name.
        message: error reported when a required field is empty.
        required: an empty optional field becomes None and skips every other step.
        checks: (predicate, message) pairs applied to the trimmed text.
        convert: turns the trimmed text into a value; raising ValueError reports
            ``convert_message``. Converted values are not escaped.
        many: the field carries a list of values; each item is trimmed and escaped.
    """
    name: str
    message: str = ""
    required: bool = True
    checks: tuple = ()
    convert: Optional[Callable] = None
    convert_message: str = ""
    many: bool = False


@dataclass
class ValidationResult:
    values: dict
    errors: list = dataclass_field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def as_list(value) -> list:
    """
    Bring a field that may hold zero, one or several values to a list.

    absent -> [], a single value -> [value], a list or tuple -> the same items.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def first(value):
    """The single value of a field that was submitted more than once, or the value itself."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def sanitize(text: str) -> str:
    """Escape markup-unsafe characters for safe redisplay."""
    return str(escape(text))


def parse_date(date_str: str):
    """
    Parse a HTML <input type="date"> ('YYYY-MM-DD') into a datetime.date.

    Raises:
        ValueError: for anything that is not a valid calendar date.
    """
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def is_alphanumeric(text: str) -> bool:
    return bool(ALPHANUMERIC.match(text))


def length_between(low: int, high: int) -> Callable[[str], bool]:
    return lambda text: low <= len(text) <= high


def _clean(field: Field, raw, errors: list):
    text = "" if raw is None else str(first(raw)).strip()

    if not text:
        if field.required:
            errors.append(FieldError(field.name, field.message))
            return text
        return None

    for check, message in field.checks:
        if not check(text):
            errors.append(FieldError(field.name, message))

    if field.convert is not None:
        try:
            return field.convert(text)
        except ValueError:
            errors.append(FieldError(field.name, field.convert_message or field.message))

    return sanitize(text)


def validate(raw: dict, ruleset) -> ValidationResult:
    """
    Validate and sanitize ``raw`` form input against ``ruleset``.

    Returns:
        ValidationResult: sanitized values for every field of the ruleset, and
        the errors in ruleset order.
    """
    result = ValidationResult(values={})
    for field in ruleset:
        value = raw.get(field.name)
        if field.many:
            items = (str(item).strip() for item in as_list(value))
            result.values[field.name] = [sanitize(item) for item in items if item]
        else:
            result.values[field.name] = _clean(field, value, result.errors)
    return result


AUTHOR_FIELDS = (
    Field("first_name", "First name must be specified.",
          checks=((is_alphanumeric, "First name has non-alphanumeric characters."),)),
    Field("family_name", "Family name must be specified.",
          checks=((is_alphanumeric, "Family name has non-alphanumeric characters."),)),
    Field("date_of_birth", required=False, convert=parse_date, convert_message="Invalid date of birth"),
    Field("date_of_death", required=False, convert=parse_date, convert_message="Invalid date of death"),
)

BOOK_FIELDS = (
    Field("title", "Title must not be empty."),
    Field("author", "Author must not be empty."),
    Field("summary", "Summary must not be empty."),
    Field("isbn", "ISBN must not be empty."),
    Field("genre", many=True),
)

GENRE_FIELDS = (
    Field("name", "Genre name required",
          checks=((length_between(3, 100), "Genre name must be between 3 and 100 characters."),)),
)

BOOK_INSTANCE_FIELDS = (
    Field("book", "Book must be specified"),
    Field("imprint", "Imprint must be specified"),
    Field("due_back", required=False, convert=parse_date, convert_message="Invalid date"),
    Field("status", "Status must be specified",
          checks=((lambda text: text in STATUS_CHOICES, "Invalid status"),)),
)
