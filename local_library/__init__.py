"""Local Library: a small catalog of authors, genres, books and book copies.

Features:
- Role-gated CRUD for authors, genres, books and book instances
- Delete confirmation that refuses while dependent records exist
- Account registration, login/logout, own-profile editing and password reset
- CSRF protection on HTML forms (Flask-WTF), security headers (Flask-Talisman)
"""

import jinja2
from flask import Flask, redirect, request, url_for
from flask_login import current_user
from flask_talisman import Talisman
from flask_wtf import CSRFProtect
from werkzeug.routing import IntegerConverter

from .auth import authorize_request, login_manager
from .cli import register_commands
from .config import Config
from .errors import register_error_handlers
from .models import MAX_ID, db
from .templates import TEMPLATES

csrf = CSRFProtect()


class IdConverter(IntegerConverter):
    """Positive integer that fits a store primary key; anything larger does not route."""

    def __init__(self, map, *args, **kwargs):
        kwargs.update(min=1, max=MAX_ID)
        super().__init__(map, *args, **kwargs)


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.jinja_loader = jinja2.DictLoader(TEMPLATES)
    app.url_map.converters["id"] = IdConverter

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)
    Talisman(
        app,
        force_https=app.config["FORCE_HTTPS"],
        session_cookie_secure=app.config["FORCE_HTTPS"],
        content_security_policy=app.config["CONTENT_SECURITY_POLICY"],
    )

    from . import catalog, users
    app.register_blueprint(catalog.bp)
    app.register_blueprint(users.bp)

    # runs for every request, including ones that fail to route
    app.before_request(authorize_request)

    register_error_handlers(app)
    register_commands(app)

    @app.route("/")
    def index():
        return redirect(url_for("catalog.index"))

    @app.context_processor
    def inject_principal():
        principal = current_user.to_dict() if current_user.is_authenticated else None
        return {"principal": principal}

    @app.after_request
    def log_request(response):
        app.logger.info("%s %s %s", request.method, request.path, response.status_code)
        return response

    with app.app_context():
        db.create_all()

    return app
