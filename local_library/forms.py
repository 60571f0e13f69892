from datetime import datetime

import bleach
from dateutil.parser import parse as dateparse
from flask_wtf import FlaskForm
from wtforms import (
    HiddenField, PasswordField, SelectField, SelectMultipleField, StringField, TextAreaField
)
from wtforms.validators import (
    AnyOf, DataRequired, Email, Length, Optional, Regexp, ValidationError
)

from .models import BOOKINSTANCE_STATUSES, ROLE_NAMES, Author, Book, User, db, parse_id

SUMMARY_ALLOWED_TAGS = frozenset(['b', 'i', 'u', 'em', 'strong', 'p', 'br', 'ul', 'ol', 'li'])

PASSWORD_LENGTH_MESSAGE = 'Password must be between 4-32 characters long.'
PASSWORDS_DO_NOT_MATCH = 'Passwords do not match.'
ROLE_REQUIRED_MESSAGE = 'A role must be selected for the user.'


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


def parse_form_date(value):
    """Parse a form date; YYYY-MM-DD first, a complete dateutil date second.

    dateutil fills missing parts from its default, so the text is parsed
    against two different defaults; a partial date ("5", "March") differs.
    """
    if not value:
        return None
    s = value.strip()
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        pass
    try:
        first = dateparse(s, default=datetime(1, 1, 1)).date()
        second = dateparse(s, default=datetime(2, 2, 2)).date()
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid date: {value!r}")
    if first != second:
        raise ValueError(f"Incomplete date: {value!r}")
    return first


class ValidDate:
    def __init__(self, message='Invalid date'):
        self.message = message

    def __call__(self, form, field):
        try:
            parse_form_date(field.data)
        except ValueError:
            raise ValidationError(self.message)


def sanitize_html(field):
    if field.data:
        field.data = bleach.clean(field.data, tags=SUMMARY_ALLOWED_TAGS, strip=True)


def form_failures(form):
    """Flatten form errors into (field, message) pairs in field order."""
    failures = []
    for field in form:
        for message in field.errors:
            failures.append((field.name, message))
    return failures


# --------------------
# Catalog forms
# --------------------
class AuthorForm(FlaskForm):
    first_name = StringField('First Name', filters=[strip_filter], validators=[
        DataRequired(message='First name must be specified.'), Length(max=100)])
    family_name = StringField('Family Name', filters=[strip_filter], validators=[
        DataRequired(message='Family name must be specified.'),
        Regexp(r'^[A-Za-z0-9]+$', message='Family name must be alphanumeric text.'),
        Length(max=100)])
    date_of_birth = StringField('Date of birth', filters=[strip_filter], validators=[Optional(), ValidDate()])
    date_of_death = StringField('Date of death', filters=[strip_filter], validators=[Optional(), ValidDate()])


class GenreForm(FlaskForm):
    name = StringField('Genre', filters=[strip_filter], validators=[
        Length(min=3, message='Genre name must contain at least 3 characters'),
        Length(max=100, message='Genre name must not exceed 100 characters')])


class BookForm(FlaskForm):
    title = StringField('Title', filters=[strip_filter], validators=[
        DataRequired(message='Title must not be empty.'), Length(max=300)])
    author = StringField('Author', filters=[strip_filter], validators=[
        DataRequired(message='Author must not be empty.')])
    summary = TextAreaField('Summary', filters=[strip_filter], validators=[
        DataRequired(message='Summary must not be empty.')])
    isbn = StringField('ISBN', filters=[strip_filter], validators=[
        DataRequired(message='ISBN must not be empty.'), Length(max=32)])
    genre = SelectMultipleField('Genre', coerce=int, choices=[])

    def validate_author(form, field):
        author_id = parse_id(field.data)
        if author_id is None or db.session.get(Author, author_id) is None:
            raise ValidationError('Author must exist.')

    def validate_summary(form, field):
        sanitize_html(field)


class BookInstanceForm(FlaskForm):
    book = StringField('Book', filters=[strip_filter], validators=[
        DataRequired(message='Book must be specified')])
    imprint = StringField('Imprint', filters=[strip_filter], validators=[
        DataRequired(message='Imprint must be specified'), Length(max=300)])
    status = SelectField('Status', default='Maintenance',
                         choices=[(s, s) for s in BOOKINSTANCE_STATUSES])
    due_back = StringField('Date when book available', filters=[strip_filter],
                           validators=[Optional(), ValidDate()])

    def validate_book(form, field):
        book_id = parse_id(field.data)
        if book_id is None or db.session.get(Book, book_id) is None:
            raise ValidationError('Book must exist.')


# --------------------
# Account forms
# --------------------
class PasswordPairMixin:
    """Adds the password/password_confirm equality check to ``validate``."""

    def validate(self, extra_validators=None):
        valid = super().validate(extra_validators=extra_validators)
        if not User.passwords_match(self.password.data or '', self.password_confirm.data or ''):
            self.password_confirm.errors.append(PASSWORDS_DO_NOT_MATCH)
            valid = False
        return valid


class RegisterForm(PasswordPairMixin, FlaskForm):
    username = StringField('Username', filters=[strip_filter], validators=[
        Length(min=3, max=150, message='Username must be at least 3 characters long.')])
    fullname = StringField('Full name', filters=[strip_filter], validators=[
        Length(min=3, max=150, message='Full name must be at least 3 characters long.')])
    email = StringField('Email', filters=[strip_filter], validators=[
        Email(message='Please enter a valid email address.')])
    role = SelectField('Role', validate_choice=False,
                       choices=[(str(k), v) for k, v in ROLE_NAMES.items()],
                       validators=[DataRequired(message=ROLE_REQUIRED_MESSAGE),
                                   AnyOf([str(k) for k in ROLE_NAMES], message=ROLE_REQUIRED_MESSAGE)])
    password = PasswordField('Password', validators=[
        Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])
    password_confirm = PasswordField('Confirm password', validators=[
        Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])


class UserUpdateForm(RegisterForm):
    # role is kept as stored; leaving both passwords empty keeps the old one,
    # filling only one of them is a mismatch
    role = None
    password = PasswordField('Password', validators=[
        Optional(), Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])
    password_confirm = PasswordField('Confirm password', validators=[
        Optional(), Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])


class LoginForm(FlaskForm):
    username = StringField('Username', filters=[strip_filter], validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class ResetForm(FlaskForm):
    username = StringField('Username', filters=[strip_filter], validators=[
        Length(min=3, message='Username must be at least 3 characters long.')])
    email = StringField('Email', filters=[strip_filter], validators=[
        Email(message='Please enter a valid email address.')])


class ResetFinalForm(PasswordPairMixin, FlaskForm):
    userid = HiddenField()
    token = HiddenField()
    password = PasswordField('New password', validators=[
        Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])
    password_confirm = PasswordField('Confirm new password', validators=[
        Length(min=4, max=32, message=PASSWORD_LENGTH_MESSAGE)])
