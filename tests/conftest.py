"""
Pytest configuration and fixtures for the local library tests.

Every test gets a fresh application on an in-memory SQLite store. Store
access from a test happens inside its own ``app.app_context()`` so it never
shares a session with the requests made through the test client.
"""
import re
from urllib.parse import urlsplit

import pytest

from local_library import create_app
from local_library.config import TestingConfig
from local_library.models import (
    ROLE_ADMIN, ROLE_EDITOR, ROLE_USER, Author, Book, BookInstance, Genre, User, db
)

PASSWORD = "secret1"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def created_id(response, entity):
    """Id of the record a create view redirected to."""
    match = re.fullmatch(rf"/catalog/{entity}/(\d+)", location_path(response))
    assert match, response.headers["Location"]
    return int(match.group(1))


def location_path(response):
    """Path part of a redirect's Location header."""
    return urlsplit(response.headers["Location"]).path


def page_text(response):
    return response.get_data(as_text=True)


# ============================================================================
# Store helpers
# ============================================================================

@pytest.fixture
def store(app):
    """Small helper around the store that always works in a fresh app context."""

    class Store:
        def add(self, obj):
            with app.app_context():
                db.session.add(obj)
                db.session.commit()
                return obj.id

        def author(self, first_name="Patrick", family_name="Rothfuss", **fields):
            return self.add(Author(first_name=first_name, family_name=family_name, **fields))

        def genre(self, name="Fantasy"):
            return self.add(Genre(name=name))

        def book(self, author_id, title="The Name of the Wind", genre_ids=(), **fields):
            with app.app_context():
                book = Book(title=title, author_id=author_id,
                            summary=fields.pop("summary", "A summary."),
                            isbn=fields.pop("isbn", "9781473211896"), **fields)
                book.genres = [db.session.get(Genre, gid) for gid in genre_ids]
                db.session.add(book)
                db.session.commit()
                return book.id

        def bookinstance(self, book_id, imprint="Gollancz, 2011.", **fields):
            return self.add(BookInstance(book_id=book_id, imprint=imprint, **fields))

        def user(self, username="reader", role=ROLE_USER, password=PASSWORD, **fields):
            with app.app_context():
                user = User(username=username, fullname=fields.pop("fullname", "Test Reader"),
                            email=fields.pop("email", f"{username}@library.org"), role=role)
                user.set_password(password)
                db.session.add(user)
                db.session.commit()
                return user.id

        def get(self, model, entity_id):
            with app.app_context():
                obj = db.session.get(model, entity_id)
                if obj is not None:
                    db.session.expunge(obj)
                return obj

        def count(self, model, **filters):
            with app.app_context():
                return model.query.filter_by(**filters).count()

    return Store()


# ============================================================================
# Logged-in clients
# ============================================================================

def login(client, username, password=PASSWORD):
    return client.post("/users/login", data={"username": username, "password": password})


@pytest.fixture
def login_as(client, store):
    """Create a user with ``role`` and log the test client in as that user."""

    def _login_as(role, username=None):
        username = username or f"user{role}"
        user_id = store.user(username=username, role=role)
        response = login(client, username)
        assert response.status_code == 302
        return user_id

    return _login_as


@pytest.fixture
def admin_client(client, login_as):
    login_as(ROLE_ADMIN)
    return client


@pytest.fixture
def editor_client(client, login_as):
    login_as(ROLE_EDITOR)
    return client


@pytest.fixture
def reader_client(client, login_as):
    login_as(ROLE_USER)
    return client
