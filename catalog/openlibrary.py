"""
Book summary lookup on Open Library, used to pre-fill an empty summary on the
book form when ``SUMMARY_LOOKUP`` is switched on.
"""
import logging

import requests

log = logging.getLogger(__name__)

SESSION = requests.Session()
SESSION.headers.update({
    "User-Agent": "LocalLibrary/1.0 (catalog)",
    "Accept": "application/json",
})

BASE_URL = "https://openlibrary.org"


def normalize_isbn(isbn: str) -> str:
    """Strip the separators a cataloguer may type into an ISBN."""
    return "".join(ch for ch in (isbn or "") if ch not in "- ").strip()


def extract_summary(record: dict) -> str | None:
    """
    Summary text of an edition or work record, or None when it has none.

    Open Library stores ``description`` either as text or as
    ``{"type": "/type/text", "value": ...}``.
    """
    description = record.get("description")
    if isinstance(description, dict):
        description = description.get("value")
    if not isinstance(description, str):
        return None
    return description.strip() or None


def _get_json(url: str, timeout: float) -> dict | None:
    try:
        r = SESSION.get(url, timeout=timeout)
        if r.status_code != 200:
            log.info("Open Library returned %s for %s", r.status_code, url)
            return None
        return r.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning("Open Library lookup failed for %s: %s", url, exc)
        return None


def _first_work_key(edition: dict) -> str | None:
    works = edition.get("works")
    if isinstance(works, list) and works and isinstance(works[0], dict):
        return works[0].get("key")
    return None


def fetch_summary_by_isbn(isbn: str, timeout: float = 8) -> str | None:
    """
    Summary for ``isbn``: the edition's own description, else the description
    of the first work the edition belongs to. Lookup failures yield None.
    """
    isbn = normalize_isbn(isbn)
    if not isbn:
        return None

    edition = _get_json(f"{BASE_URL}/isbn/{isbn}.json", timeout)
    if edition is None:
        return None

    summary = extract_summary(edition)
    if summary:
        return summary

    work_key = _first_work_key(edition)
    if not work_key:
        return None
    work = _get_json(f"{BASE_URL}{work_key}.json", timeout)
    return extract_summary(work) if work is not None else None
