import re

import pytest

from local_library.auth import load_user
from local_library.models import ROLE_ADMIN, ROLE_EDITOR, ROLE_USER, User
from local_library.users import (
    LOGIN_FAILED_MESSAGE, REGISTERED_MESSAGE, RESET_DONE_MESSAGE, RESET_NO_MATCH_MESSAGE,
    USERNAME_TAKEN_MESSAGE
)

from conftest import PASSWORD, location_path, login, page_text


def registration(**overrides):
    data = {
        "username": "kvothe",
        "fullname": "Kvothe Arliden",
        "email": "kvothe@university.org",
        "role": str(ROLE_EDITOR),
        "password": "lute1234",
        "password_confirm": "lute1234",
    }
    data.update(overrides)
    return data


# ============================================================================
# Registration
# ============================================================================

def test_register_page(client):
    response = client.get("/users/register")
    assert response.status_code == 200
    assert "Register" in page_text(response)


def test_register_success(client, store):
    response = client.post("/users/register", data=registration())
    assert response.status_code == 302
    assert location_path(response) == "/users/login"
    assert REGISTERED_MESSAGE in page_text(client.get("/users/login"))

    assert store.count(User, username="kvothe") == 1
    with client.application.app_context():
        user = User.query.filter_by(username="kvothe").one()
        assert user.role == ROLE_EDITOR
        assert len(user.salt) == 32
        assert len(user.hash) == 256
        assert user.hash != "lute1234"
        assert user.validate_password("lute1234")


def test_register_password_mismatch(client, store):
    response = client.post("/users/register", data=registration(password_confirm="lute9999"))
    assert response.status_code == 200
    assert "Passwords do not match." in page_text(response)
    assert store.count(User) == 0


@pytest.mark.parametrize("field, value, message", [
    ("username", "kv", "Username must be at least 3 characters long."),
    ("fullname", "K", "Full name must be at least 3 characters long."),
    ("email", "not-an-email", "Please enter a valid email address."),
    ("role", "", "A role must be selected for the user."),
    ("role", "7", "A role must be selected for the user."),
    ("password", "abc", "Password must be between 4-32 characters long."),
])
def test_register_field_rules(client, store, field, value, message):
    response = client.post("/users/register", data=registration(**{field: value}))
    assert response.status_code == 200
    assert message in page_text(response)
    assert store.count(User) == 0


def test_register_duplicate_username(client, store):
    store.user(username="kvothe")
    response = client.post("/users/register", data=registration())
    assert response.status_code == 200
    assert USERNAME_TAKEN_MESSAGE in page_text(response)
    assert store.count(User) == 1


# ============================================================================
# Login / logout
# ============================================================================

def test_login_success(client, store):
    store.user(username="denna")
    response = login(client, "denna")
    assert response.status_code == 302
    assert location_path(response) == "/"
    assert "Signed in as" in page_text(client.get("/catalog"))


def test_login_failure(client, store):
    store.user(username="denna")
    response = login(client, "denna", "wrong-password")
    assert location_path(response) == "/users/login"
    assert LOGIN_FAILED_MESSAGE in page_text(client.get("/users/login"))

    response = login(client, "nobody")
    assert location_path(response) == "/users/login"


@pytest.mark.parametrize("path", ["/users/login", "/users/register", "/users/reset"])
def test_authenticated_visitors_sent_home(reader_client, path):
    response = reader_client.get(path)
    assert response.status_code == 302
    assert location_path(response) == "/"


def test_logout_clears_session(reader_client):
    with reader_client.session_transaction() as session:
        session["scratch"] = "value"
    response = reader_client.get("/users/logout")
    assert location_path(response) == "/"
    with reader_client.session_transaction() as session:
        assert "scratch" not in session
    response = reader_client.get("/catalog/author/1")
    assert location_path(response) == "/users/login"


def test_users_root_redirects_home(client):
    response = client.get("/users/")
    assert location_path(response) == "/"


# ============================================================================
# Profile
# ============================================================================

def test_own_profile(client, login_as, store):
    user_id = login_as(ROLE_ADMIN)
    response = client.get(f"/users/{user_id}")
    text = page_text(response)
    assert response.status_code == 200
    assert "user2" in text
    assert "Admin" in text
    user = store.get(User, user_id)
    assert user.salt not in text
    assert user.hash not in text


def test_other_profile_redirects_silently(client, login_as, store):
    other_id = store.user(username="elodin")
    login_as(ROLE_ADMIN)
    response = client.get(f"/users/{other_id}")
    assert response.status_code == 302
    assert location_path(response) == "/"
    assert client.get(f"/users/{other_id}/update").status_code == 302
    # no notice is queued
    assert "not authorized" not in page_text(client.get("/catalog"))


def test_anonymous_profile_redirects_home(client, store):
    user_id = store.user()
    assert location_path(client.get(f"/users/{user_id}")) == "/"


def test_update_profile_keeps_role_and_password(client, login_as, store):
    user_id = login_as(ROLE_EDITOR)
    form = client.get(f"/users/{user_id}/update")
    assert form.status_code == 200
    assert 'name="role"' not in page_text(form)

    response = client.post(f"/users/{user_id}/update", data={
        "username": "user1", "fullname": "Simmon", "email": "simmon@university.org",
        "role": str(ROLE_ADMIN), "password": "", "password_confirm": ""})
    assert location_path(response) == f"/users/{user_id}"

    user = store.get(User, user_id)
    assert user.fullname == "Simmon"
    assert user.role == ROLE_EDITOR

    client.get("/users/logout")
    assert location_path(login(client, "user1", PASSWORD)) == "/"


def test_update_profile_changes_password(client, login_as):
    user_id = login_as(ROLE_USER)
    client.post(f"/users/{user_id}/update", data={
        "username": "user0", "fullname": "Test Reader", "email": "user0@library.org",
        "password": "newpass", "password_confirm": "newpass"})
    client.get("/users/logout")
    assert location_path(login(client, "user0", PASSWORD)) == "/users/login"
    assert location_path(login(client, "user0", "newpass")) == "/"


def test_update_profile_password_mismatch(client, login_as):
    user_id = login_as(ROLE_USER)
    response = client.post(f"/users/{user_id}/update", data={
        "username": "user0", "fullname": "Test Reader", "email": "user0@library.org",
        "password": "newpass", "password_confirm": "other"})
    assert response.status_code == 200
    assert "Passwords do not match." in page_text(response)


def test_update_profile_username_taken(client, login_as, store):
    store.user(username="elodin")
    user_id = login_as(ROLE_USER)
    response = client.post(f"/users/{user_id}/update", data={
        "username": "elodin", "fullname": "Test Reader", "email": "user0@library.org"})
    assert response.status_code == 200
    assert USERNAME_TAKEN_MESSAGE in page_text(response)


# ============================================================================
# Password reset
# ============================================================================

def hidden_value(text, name):
    match = re.search(rf'name="{name}" value="([^"]*)"', text)
    assert match, f"no hidden {name} field"
    return match.group(1)


def test_reset_no_match(client, store):
    store.user(username="auri", email="auri@underthing.org")
    response = client.post("/users/reset", data={"username": "auri", "email": "other@underthing.org"})
    assert response.status_code == 200
    assert RESET_NO_MATCH_MESSAGE in page_text(response)


def test_reset_validates_step_one(client):
    response = client.post("/users/reset", data={"username": "au", "email": "nope"})
    text = page_text(response)
    assert "Username must be at least 3 characters long." in text
    assert "Please enter a valid email address." in text


def test_reset_two_steps_preserves_role(client, store):
    user_id = store.user(username="auri", email="auri@underthing.org", role=ROLE_ADMIN)
    step_one = client.post("/users/reset", data={"username": "auri", "email": "auri@underthing.org"})
    text = page_text(step_one)
    assert step_one.status_code == 200
    assert hidden_value(text, "userid") == str(user_id)
    token = hidden_value(text, "token")

    response = client.post("/users/resetfinal", data={
        "userid": str(user_id), "token": token,
        "password": "moonlight", "password_confirm": "moonlight"})
    assert location_path(response) == "/users/login"
    assert RESET_DONE_MESSAGE in page_text(client.get("/users/login"))

    assert store.get(User, user_id).role == ROLE_ADMIN
    assert location_path(login(client, "auri", "moonlight")) == "/"


def test_reset_final_mismatch_stays_on_step_two(client, store):
    user_id = store.user(username="auri", email="auri@underthing.org")
    text = page_text(client.post("/users/reset", data={"username": "auri", "email": "auri@underthing.org"}))
    response = client.post("/users/resetfinal", data={
        "userid": str(user_id), "token": hidden_value(text, "token"),
        "password": "moonlight", "password_confirm": "sunlight"})
    assert response.status_code == 200
    assert "Passwords do not match." in page_text(response)
    assert hidden_value(page_text(response), "userid") == str(user_id)


def test_reset_final_rejects_swapped_user(client, store):
    store.user(username="auri", email="auri@underthing.org")
    victim_id = store.user(username="ambrose", role=ROLE_ADMIN)
    text = page_text(client.post("/users/reset", data={"username": "auri", "email": "auri@underthing.org"}))

    response = client.post("/users/resetfinal", data={
        "userid": str(victim_id), "token": hidden_value(text, "token"),
        "password": "stolen1", "password_confirm": "stolen1"})
    assert response.status_code == 200
    assert RESET_NO_MATCH_MESSAGE in page_text(response)
    assert location_path(login(client, "ambrose", PASSWORD)) == "/"


def test_reset_token_is_single_use(client, store):
    user_id = store.user(username="auri", email="auri@underthing.org")
    text = page_text(client.post("/users/reset", data={"username": "auri", "email": "auri@underthing.org"}))
    data = {"userid": str(user_id), "token": hidden_value(text, "token"),
            "password": "moonlight", "password_confirm": "moonlight"}
    assert client.post("/users/resetfinal", data=data).status_code == 302

    data.update(password="again12", password_confirm="again12")
    response = client.post("/users/resetfinal", data=data)
    assert response.status_code == 200
    assert RESET_NO_MATCH_MESSAGE in page_text(response)


def test_update_profile_with_one_password_field_is_a_mismatch(client, login_as):
    user_id = login_as(ROLE_USER)
    response = client.post(f"/users/{user_id}/update", data={
        "username": "user0", "fullname": "Test Reader", "email": "user0@library.org",
        "password": "newpass", "password_confirm": ""})
    assert response.status_code == 200
    assert "Passwords do not match." in page_text(response)

    client.get("/users/logout")
    assert location_path(login(client, "user0", PASSWORD)) == "/"


def test_reset_final_with_oversized_user_id(client):
    response = client.post("/users/resetfinal", data={
        "userid": "99999999999999999999999", "token": "0" * 64,
        "password": "moonlight", "password_confirm": "moonlight"})
    assert response.status_code == 200
    assert RESET_NO_MATCH_MESSAGE in page_text(response)


def test_oversized_profile_id_is_404(reader_client):
    response = reader_client.get("/users/99999999999999999999999")
    assert response.status_code == 404


@pytest.mark.parametrize("raw", ["99999999999999999999999", "0", "-4", "abc", None])
def test_user_loader_ignores_impossible_ids(app, raw):
    with app.app_context():
        assert load_user(raw) is None
