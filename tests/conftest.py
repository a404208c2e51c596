from datetime import date
from types import SimpleNamespace

import pytest
from flask import template_rendered

from locallibrary import create_app
from locallibrary.config import TestConfig
from locallibrary.extensions import db
from locallibrary.models import Author, Book, BookInstance, Genre


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repos(app):
    return app.extensions['locallibrary']['repos']


@pytest.fixture
def captured_templates(app):
    recorded = []

    def record(sender, template, context, **extra):
        recorded.append((template, context))

    template_rendered.connect(record, app)
    yield recorded
    template_rendered.disconnect(record, app)


@pytest.fixture
def make(app, repos):
    """Create records in their own app context and hand back their ids."""

    def genre(name="Fantasy"):
        with app.app_context():
            return repos.genres.create(Genre(name=name)).id

    def author(first_name="Patrick", family_name="Rothfuss", **kwargs):
        with app.app_context():
            return repos.authors.create(Author(first_name=first_name, family_name=family_name, **kwargs)).id

    def book(author_id, genre_id, title="The Name of the Wind", summary="Kvothe's tale.", isbn="9781473211896"):
        with app.app_context():
            return repos.books.create(Book(title=title, author_id=author_id, genre_id=genre_id,
                                           summary=summary, isbn=isbn)).id

    def copy(book_id, imprint="Gollancz, 2011.", status="Available", due_back=None):
        with app.app_context():
            return repos.book_instances.create(BookInstance(book_id=book_id, imprint=imprint, status=status,
                                                            due_back=due_back or date(2020, 1, 1))).id

    return SimpleNamespace(genre=genre, author=author, book=book, copy=copy)


@pytest.fixture
def query(app, repos):
    """Run ``fn(repos)`` inside an app context, for asserting on stored state."""

    def run(fn):
        with app.app_context():
            return fn(repos)

    return run
