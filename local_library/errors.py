"""Error taxonomy and the application's error handlers.

Field-level validation failures are reported by WTForms and stay on the form;
missing records raise werkzeug's ``NotFound`` through ``db.get_or_404``.  The
exceptions below cover the remaining cases:

- ``Unauthenticated`` / ``Forbidden`` are raised by the authorization gate and
  always end in a redirect plus a one-shot notice, never a raw HTTP error.
- ``IntegrityBlocked`` is raised by the delete guard when dependent records
  exist; catalog views catch it and re-render the confirmation page.

Store failures (``SQLAlchemyError``) are not recovered; the session is rolled
back and a generic 500 page is rendered.
"""

import logging

from flask import current_app, flash, redirect, render_template, url_for
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from .models import db

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "You need to login first!"
NOT_AUTHORIZED_MESSAGE = "You're not authorized to access this page!"


class Unauthenticated(Exception):
    """No authenticated principal on a guarded path."""

    def __init__(self, path, operation):
        super().__init__(f"login required for {operation} on {path}")
        self.path = path
        self.operation = operation


class Forbidden(Exception):
    """The principal's role does not grant the required operation."""

    def __init__(self, path, operation, role):
        super().__init__(f"role {role!r} may not {operation} on {path}")
        self.path = path
        self.operation = operation
        self.role = role


class IntegrityBlocked(Exception):
    """Deletion refused while dependent records still reference the entity."""

    def __init__(self, entity, dependents):
        super().__init__(f"{entity!r} still has {len(dependents)} dependent record(s)")
        self.entity = entity
        self.dependents = dependents


def _show_detail():
    flag = current_app.config.get("SHOW_ERROR_DETAIL")
    return current_app.debug if flag is None else flag


def render_error(error, status, cause=None):
    cause = cause or getattr(error, "original_exception", None) or error
    return render_template(
        "error.html",
        title="Error",
        status=status,
        name=getattr(error, "name", None) or "Error",
        message=getattr(error, "description", None) or "Internal Server Error",
        detail=repr(cause) if _show_detail() else None,
    ), status


def register_error_handlers(app):

    @app.errorhandler(Unauthenticated)
    def handle_unauthenticated(error):
        logger.info("Unauthenticated: %s", error)
        flash(LOGIN_REQUIRED_MESSAGE, "error")
        return redirect(url_for("users.login"))

    @app.errorhandler(Forbidden)
    def handle_forbidden(error):
        logger.info("Forbidden: %s", error)
        flash(NOT_AUTHORIZED_MESSAGE, "error")
        return redirect(url_for("users.warning"))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return render_error(error, error.code or 500)

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        logger.exception("Store error")
        return render_error(InternalServerError(), 500, cause=error)
