"""Role-based authorization for catalog routes.

Roles map to the operations they may perform:

    0 (User)   read
    1 (Editor) read, create, update
    2 (Admin)  read, create, update, delete

A request path is matched against an ordered list of (pattern, operation)
rules; the first match decides the operation the request needs.  The create
rule comes before the bare-detail rule so that ``/catalog/book/create`` is
never read as the detail page of a book with id "create".  Paths matching no
rule are not guarded.
"""

import logging
import re
from types import MappingProxyType

from flask import request
from flask_login import LoginManager, current_user

from .errors import Forbidden, Unauthenticated
from .models import ROLE_ADMIN, ROLE_EDITOR, ROLE_USER, User, db, parse_id

logger = logging.getLogger(__name__)

READ = 'read'
CREATE = 'create'
UPDATE = 'update'
DELETE = 'delete'

PERMISSIONS = MappingProxyType({
    ROLE_USER: frozenset({READ}),
    ROLE_EDITOR: frozenset({READ, CREATE, UPDATE}),
    ROLE_ADMIN: frozenset({READ, CREATE, UPDATE, DELETE}),
})

_ENTITY = r'(?:author|book|bookinstance|genre)'
_ID = r'[a-zA-Z0-9]+'

# (pattern, operation); operation None means "take it from the 'verb' group"
ROUTE_RULES = (
    (re.compile(rf'^/catalog/{_ENTITY}/create/?$'), CREATE),
    (re.compile(rf'^/catalog/{_ENTITY}/{_ID}/(?P<verb>delete|update)/?$'), None),
    (re.compile(rf'^/catalog/{_ENTITY}/{_ID}/?$'), READ),
)


class AuthorizationGate:
    def __init__(self, permissions=PERMISSIONS, rules=ROUTE_RULES):
        self.permissions = permissions
        self.rules = rules

    def required_operation(self, path):
        """Return the operation ``path`` requires, or None if it is unguarded."""
        for pattern, operation in self.rules:
            match = pattern.match(path)
            if match:
                return operation or match.group('verb')
        return None

    def permits(self, role, operation):
        # unknown roles (and non-integers) get nothing
        if isinstance(role, bool) or not isinstance(role, int):
            return False
        return operation in self.permissions.get(role, frozenset())

    def check(self, principal, path):
        """Raise Unauthenticated or Forbidden unless ``principal`` may access ``path``."""
        operation = self.required_operation(path)
        if operation is None:
            return None
        if principal is None or not getattr(principal, 'is_authenticated', False):
            raise Unauthenticated(path, operation)
        role = getattr(principal, 'role', None)
        if not self.permits(role, operation):
            raise Forbidden(path, operation, role)
        return operation


gate = AuthorizationGate()


def authorize_request():
    """Application-wide before_request hook; unguarded paths pass through."""
    gate.check(current_user, request.path)


# --------------------
# Session login
# --------------------
login_manager = LoginManager()
login_manager.login_view = 'users.login'


@login_manager.user_loader
def load_user(user_id):
    entity_id = parse_id(user_id)
    if entity_id is None:
        return None
    return db.session.get(User, entity_id)
