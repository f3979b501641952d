"""
Pytest configuration for bookgraph tests.
"""

import os

import pytest

from bookgraph.core.models import Entity, SentimentVector


def pytest_configure(config):
    """Keep tests independent of any local scoring credentials."""
    os.environ["BOOKGRAPH_ENVIRONMENT"] = "test"
    os.environ.pop("BOOKGRAPH_LLM_API_KEY", None)


@pytest.fixture
def make_book():
    """Factory for scored books: make_book("id", (m, s, o, p, a), **attrs)."""

    def _make(book_id: str, scores=(0.5, 0.5, 0.5, 0.5, 0.5), **attrs) -> Entity:
        return Entity(
            id=book_id,
            title=attrs.pop("title", f"Book {book_id}"),
            author=attrs.pop("author", "Test Author"),
            category=attrs.pop("category", "Sci-Fi"),
            year=attrs.pop("year", 2000),
            vector=SentimentVector(*scores),
            **attrs,
        )

    return _make


@pytest.fixture
def axis_books(make_book):
    """Two identical books plus two books on their own axes."""
    return [
        make_book("e1", (1, 0, 0, 0, 0)),
        make_book("e2", (1, 0, 0, 0, 0)),
        make_book("e3", (0, 1, 0, 0, 0)),
        make_book("e4", (0, 0, 1, 0, 0)),
    ]


@pytest.fixture
def clustered_books(make_book):
    """
    Four near-identical books and one outlier.

    The four fill each other's degree budget during selection, so the
    outlier is left without edges and must be repaired onto the anchor.
    """
    return [
        make_book("a", (1, 0.1, 0, 0, 0)),
        make_book("b", (1, 0, 0.1, 0, 0)),
        make_book("c", (1, 0, 0, 0.1, 0)),
        make_book("d", (1, 0, 0, 0, 0.1)),
        make_book("e", (0, 1, 1, 1, 1)),
    ]


def _book_record(book_id: str, scores=None, **attrs) -> dict:
    record = {
        "id": book_id,
        "title": attrs.get("title", f"Book {book_id}"),
        "author": attrs.get("author", "Test Author"),
        "category": attrs.get("category", "Sci-Fi"),
        "year": attrs.get("year", 2000),
    }
    if scores is not None:
        record["sentiment"] = dict(
            zip(("moody", "scientific", "optimistic", "philosophical", "adventurous"), scores)
        )
    return record


@pytest.fixture
def book_record():
    """Factory for books as JSON records, the shape accepted by the API and CLI."""
    return _book_record


@pytest.fixture
def clustered_records():
    book_record = _book_record
    return [
        book_record("a", (1, 0.1, 0, 0, 0)),
        book_record("b", (1, 0, 0.1, 0, 0)),
        book_record("c", (1, 0, 0, 0.1, 0)),
        book_record("d", (1, 0, 0, 0, 0.1)),
        book_record("e", (0, 1, 1, 1, 1)),
    ]
