"""
Tests for the role-based authorization gate.

The gate is exercised directly (no HTTP) for rule matching and the permission
table, and through the test client for the redirect + notice behaviour.
"""
from types import SimpleNamespace

import pytest
from hypothesis import given, strategies as st

from local_library.auth import (
    CREATE, DELETE, PERMISSIONS, READ, UPDATE, AuthorizationGate, gate
)
from local_library.errors import (
    LOGIN_REQUIRED_MESSAGE, NOT_AUTHORIZED_MESSAGE, Forbidden, Unauthenticated
)
from local_library.models import ROLE_ADMIN, ROLE_EDITOR, ROLE_USER, Author

from conftest import location_path, page_text

entity_strategy = st.sampled_from(["author", "book", "bookinstance", "genre"])
id_strategy = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789",
    min_size=1, max_size=24,
)
guarded_path_strategy = st.one_of(
    st.builds(lambda e: f"/catalog/{e}/create", entity_strategy),
    st.builds(lambda e, i, v: f"/catalog/{e}/{i}/{v}", entity_strategy, id_strategy,
              st.sampled_from(["update", "delete"])),
    st.builds(lambda e, i: f"/catalog/{e}/{i}", entity_strategy, id_strategy),
)


def principal(role, authenticated=True):
    return SimpleNamespace(is_authenticated=authenticated, role=role)


# ============================================================================
# Rule matching
# ============================================================================

@pytest.mark.parametrize("path, operation", [
    ("/catalog/book/create", CREATE),
    ("/catalog/author/create/", CREATE),
    ("/catalog/genre/12/update", UPDATE),
    ("/catalog/bookinstance/5/delete", DELETE),
    ("/catalog/author/7", READ),
    ("/catalog/book/abc", READ),
    ("/catalog", None),
    ("/catalog/books", None),
    ("/users/login", None),
    ("/catalog/publisher/1", None),
])
def test_required_operation(path, operation):
    assert gate.required_operation(path) == operation


@given(entity=entity_strategy)
def test_create_is_never_read_as_detail(entity):
    assert gate.required_operation(f"/catalog/{entity}/create") == CREATE


@given(entity=entity_strategy, entity_id=id_strategy.filter(lambda s: s != "create"))
def test_bare_detail_requires_read(entity, entity_id):
    assert gate.required_operation(f"/catalog/{entity}/{entity_id}") == READ


@given(entity=entity_strategy, entity_id=id_strategy, verb=st.sampled_from([UPDATE, DELETE]))
def test_verb_paths_require_the_verb(entity, entity_id, verb):
    assert gate.required_operation(f"/catalog/{entity}/{entity_id}/{verb}") == verb


# ============================================================================
# Permission table
# ============================================================================

def test_permission_table_is_read_only():
    with pytest.raises(TypeError):
        PERMISSIONS[ROLE_USER] = frozenset({READ, DELETE})


@pytest.mark.parametrize("role, allowed", [
    (ROLE_USER, {READ}),
    (ROLE_EDITOR, {READ, CREATE, UPDATE}),
    (ROLE_ADMIN, {READ, CREATE, UPDATE, DELETE}),
])
def test_permits(role, allowed):
    for operation in (READ, CREATE, UPDATE, DELETE):
        assert gate.permits(role, operation) == (operation in allowed)


@pytest.mark.parametrize("role", [None, 3, -1, "2", True])
def test_unknown_roles_get_nothing(role):
    assert not gate.permits(role, READ)


@given(path=guarded_path_strategy)
def test_reader_denied_every_write(path):
    operation = gate.required_operation(path)
    if operation == READ:
        assert gate.check(principal(ROLE_USER), path) == READ
    else:
        with pytest.raises(Forbidden):
            gate.check(principal(ROLE_USER), path)


@given(path=guarded_path_strategy)
def test_admin_permitted_everywhere(path):
    assert gate.check(principal(ROLE_ADMIN), path) == gate.required_operation(path)


@given(path=guarded_path_strategy)
def test_anonymous_is_unauthenticated(path):
    with pytest.raises(Unauthenticated):
        gate.check(principal(None, authenticated=False), path)
    with pytest.raises(Unauthenticated):
        gate.check(None, path)


def test_unguarded_path_needs_no_principal():
    assert gate.check(None, "/catalog/books") is None


def test_custom_permission_table():
    custom = AuthorizationGate(permissions={ROLE_USER: frozenset({READ, DELETE})})
    assert custom.check(principal(ROLE_USER), "/catalog/book/1/delete") == DELETE
    with pytest.raises(Forbidden):
        custom.check(principal(ROLE_USER), "/catalog/book/1/update")


# ============================================================================
# Through HTTP
# ============================================================================

def test_anonymous_redirected_to_login_with_notice(client):
    response = client.get("/catalog/author/create")
    assert response.status_code == 302
    assert location_path(response) == "/users/login"

    page = client.get("/users/login")
    assert LOGIN_REQUIRED_MESSAGE in page_text(page)
    # notices are shown once
    again = client.get("/users/login")
    assert LOGIN_REQUIRED_MESSAGE not in page_text(again)


def test_anonymous_detail_with_bad_id_still_hits_gate(client):
    response = client.get("/catalog/author/abc")
    assert response.status_code == 302
    assert location_path(response) == "/users/login"


def test_reader_redirected_to_warning_with_notice(reader_client):
    response = reader_client.get("/catalog/genre/create")
    assert response.status_code == 302
    assert location_path(response) == "/users/stop"

    page = reader_client.get("/users/stop")
    text = page_text(page)
    assert "Sorry!" in text
    assert NOT_AUTHORIZED_MESSAGE in text


def test_reader_cannot_post_delete(reader_client, store):
    author_id = store.author()
    response = reader_client.post(f"/catalog/author/{author_id}/delete")
    assert location_path(response) == "/users/stop"
    assert store.count(Author, id=author_id) == 1


def test_editor_can_create_but_not_delete(editor_client, store):
    genre_id = store.genre()
    assert editor_client.get("/catalog/genre/create").status_code == 200
    assert editor_client.get(f"/catalog/genre/{genre_id}/update").status_code == 200
    response = editor_client.get(f"/catalog/genre/{genre_id}/delete")
    assert location_path(response) == "/users/stop"


def test_lists_are_public(client):
    for path in ("/catalog", "/catalog/authors", "/catalog/books", "/catalog/genres",
                 "/catalog/bookinstances"):
        assert client.get(path).status_code == 200
