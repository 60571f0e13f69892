"""Account workflow: register, login/logout, own profile, password reset."""

import hashlib
import hmac
import logging
from functools import wraps

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for
from flask_login import current_user, login_user, logout_user

from .forms import (
    LoginForm, RegisterForm, ResetFinalForm, ResetForm, UserUpdateForm, form_failures
)
from .models import User, db, parse_id

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/users")

LOGIN_FAILED_MESSAGE = "Invalid username or password."
REGISTERED_MESSAGE = "Successfully registered. You can log in now!"
USERNAME_TAKEN_MESSAGE = "Username already taken. Choose another one."
RESET_NO_MATCH_MESSAGE = "The user does not exist or credentials did not match a user. Try again."
RESET_DONE_MESSAGE = "You have successfully changed your password. You can log in now!"


def anonymous_only(view):
    """Send already authenticated visitors to the home page."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user.is_authenticated:
            return redirect(url_for("index"))
        return view(*args, **kwargs)
    return wrapped


def owner_required(view):
    """Only the user identified by ``user_id`` may proceed; others are sent home."""
    @wraps(view)
    def wrapped(user_id, *args, **kwargs):
        if not current_user.is_authenticated or current_user.id != user_id:
            return redirect(url_for("index"))
        return view(user_id, *args, **kwargs)
    return wrapped


def username_taken(username, exclude_id=None):
    query = User.query.filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


# --------------------
# Reset tokens
# --------------------
def sign_reset(user):
    # the salt changes with every password change, so a token only works once
    message = f"reset:{user.id}:{user.salt}".encode("utf-8")
    key = current_app.config["SECRET_KEY"].encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def verify_reset(user_id, token):
    """Return the user a reset form was issued for, or None if it was tampered with."""
    entity_id = parse_id(user_id)
    if entity_id is None or not token:
        return None
    user = db.session.get(User, entity_id)
    if user is None:
        return None
    if not hmac.compare_digest(sign_reset(user), token):
        logger.warning("Rejected password reset token for user %s", user_id)
        return None
    return user


# --------------------
# Routes
# --------------------
@bp.route("/")
def users_root():
    return redirect(url_for("index"))


@bp.route("/login", methods=["GET", "POST"])
@anonymous_only
def login():
    form = LoginForm()
    if not form.is_submitted():
        return render_template("user_login.html", title="Login", form=form)

    user = None
    if form.validate():
        user = User.query.filter_by(username=form.username.data).first()
    if user is None or not user.validate_password(form.password.data):
        logger.info("Failed login for %r", form.username.data)
        flash(LOGIN_FAILED_MESSAGE, "error")
        return redirect(url_for("users.login"))

    login_user(user)
    logger.info("User %s logged in", user.id)
    return redirect(url_for("index"))


@bp.route("/logout")
def logout():
    logout_user()
    session.clear()
    return redirect(url_for("index"))


@bp.route("/register", methods=["GET", "POST"])
@anonymous_only
def register():
    form = RegisterForm()
    if form.validate_on_submit():
        if username_taken(form.username.data):
            form.username.errors.append(USERNAME_TAKEN_MESSAGE)
        else:
            user = User(
                username=form.username.data,
                fullname=form.fullname.data,
                email=form.email.data,
                role=int(form.role.data),
            )
            user.set_password(form.password.data)
            db.session.add(user)
            db.session.commit()
            logger.info("Registered user %s with role %s", user.id, user.role)
            flash(REGISTERED_MESSAGE, "success")
            return redirect(url_for("users.login"))
    return render_template("user_form.html", title="Register", form=form,
                           is_update_form=False, failures=form_failures(form))


@bp.route("/<id:user_id>")
@owner_required
def profile(user_id):
    user = db.get_or_404(User, user_id)
    return render_template("user_profile.html", title="Profile", profile=user.to_dict())


@bp.route("/<id:user_id>/update", methods=["GET", "POST"])
@owner_required
def update(user_id):
    user = db.get_or_404(User, user_id)
    if request.method == "GET":
        form = UserUpdateForm(data={
            "username": user.username,
            "fullname": user.fullname,
            "email": user.email,
        })
    else:
        form = UserUpdateForm()
    if form.validate_on_submit():
        if username_taken(form.username.data, exclude_id=user.id):
            form.username.errors.append(USERNAME_TAKEN_MESSAGE)
        else:
            user.username = form.username.data
            user.fullname = form.fullname.data
            user.email = form.email.data
            if form.password.data:
                user.set_password(form.password.data)
            db.session.commit()
            logger.info("Updated user %s", user.id)
            return redirect(user.url)
    return render_template("user_form.html", title="Update Profile", form=form,
                           is_update_form=True, failures=form_failures(form))


@bp.route("/reset", methods=["GET", "POST"])
@anonymous_only
def reset():
    form = ResetForm()
    if not form.validate_on_submit():
        return render_template("user_reset.html", title="Reset Password", form=form,
                               is_first_step=True, failures=form_failures(form))

    user = User.query.filter_by(username=form.username.data, email=form.email.data).first()
    if user is None:
        return render_template("user_reset.html", title="Reset Password", form=form,
                               is_first_step=True,
                               failures=[("username", RESET_NO_MATCH_MESSAGE)])

    final = ResetFinalForm(formdata=None, data={"userid": str(user.id), "token": sign_reset(user)})
    return render_template("user_reset.html", title="Reset Password", form=final,
                           is_second_step=True, profile=user.to_dict(), failures=[])


@bp.route("/resetfinal", methods=["POST"])
@anonymous_only
def reset_final():
    form = ResetFinalForm()
    user = verify_reset(form.userid.data, form.token.data)
    if user is None:
        return render_template("user_reset.html", title="Reset Password", form=ResetForm(formdata=None),
                               is_first_step=True,
                               failures=[("username", RESET_NO_MATCH_MESSAGE)])

    if not form.validate():
        return render_template("user_reset.html", title="Reset Password", form=form,
                               is_second_step=True, profile=user.to_dict(),
                               failures=form_failures(form))

    # role and profile fields stay as they are
    user.set_password(form.password.data)
    db.session.commit()
    logger.info("Password reset for user %s", user.id)
    flash(RESET_DONE_MESSAGE, "success")
    return redirect(url_for("users.login"))


@bp.route("/stop")
def warning():
    return render_template("user_warning.html", title="Sorry!")
