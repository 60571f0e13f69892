import hashlib
import hmac
import secrets
from datetime import date

from flask_login import UserMixin
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

BOOKINSTANCE_STATUSES = ('Available', 'Maintenance', 'Loaned', 'Reserved')

# Roles: 0 read-only user, 1 editor, 2 admin
ROLE_USER = 0
ROLE_EDITOR = 1
ROLE_ADMIN = 2
ROLE_NAMES = {ROLE_USER: 'User', ROLE_EDITOR: 'Editor', ROLE_ADMIN: 'Admin'}

PBKDF2_ITERATIONS = 10000
PBKDF2_KEY_LENGTH = 128

# largest primary key the store can hold (signed 64-bit INTEGER)
MAX_ID = 2 ** 63 - 1


def parse_id(value):
    """Primary key from untrusted input, or None if it cannot be one."""
    try:
        entity_id = int(value)
    except (TypeError, ValueError):
        return None
    if entity_id < 1 or entity_id > MAX_ID:
        return None
    return entity_id


def format_date_med(value):
    """'Jan 2, 1920' style date, empty string for None."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def format_iso(value):
    return value.strftime("%Y-%m-%d") if value else ""


# --------------------
# Models
# --------------------
book_genres = db.Table(
    'book_genres',
    db.Column('book_id', db.Integer, db.ForeignKey('books.id'), primary_key=True),
    db.Column('genre_id', db.Integer, db.ForeignKey('genres.id'), primary_key=True),
)


class Author(db.Model):
    __tablename__ = 'authors'
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=True)
    date_of_death = db.Column(db.Date, nullable=True)

    books = db.relationship('Book', back_populates='author')

    @property
    def name(self):
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self):
        return f"/catalog/author/{self.id}"

    @property
    def lifespan(self):
        return f"{format_date_med(self.date_of_birth)} - {format_date_med(self.date_of_death)}"

    @property
    def date_of_birth_yyyy_mm_dd(self):
        return format_iso(self.date_of_birth)

    @property
    def date_of_death_yyyy_mm_dd(self):
        return format_iso(self.date_of_death)

    def __repr__(self):
        return f"<Author {self.name}>"


class Genre(db.Model):
    __tablename__ = 'genres'
    id = db.Column(db.Integer, primary_key=True)
    # not unique in the schema; create checks for an existing name first
    name = db.Column(db.String(100), nullable=False, index=True)

    books = db.relationship('Book', secondary=book_genres, back_populates='genres')

    @property
    def url(self):
        return f"/catalog/genre/{self.id}"

    def __repr__(self):
        return f"<Genre {self.name}>"


class Book(db.Model):
    __tablename__ = 'books'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(300), nullable=False, index=True)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(32), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('authors.id'), nullable=False)

    author = db.relationship('Author', back_populates='books')
    genres = db.relationship('Genre', secondary=book_genres, back_populates='books', order_by='Genre.name')
    instances = db.relationship('BookInstance', back_populates='book')

    @property
    def url(self):
        return f"/catalog/book/{self.id}"

    def __repr__(self):
        return f"<Book {self.title}>"


class BookInstance(db.Model):
    __tablename__ = 'bookinstances'
    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id'), nullable=False)
    imprint = db.Column(db.String(300), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Maintenance')
    due_back = db.Column(db.Date, nullable=True, default=date.today)

    book = db.relationship('Book', back_populates='instances')

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self):
        return format_date_med(self.due_back)

    @property
    def due_back_yyyy_mm_dd(self):
        return format_iso(self.due_back)

    def __repr__(self):
        return f"<BookInstance {self.id} {self.status}>"


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), nullable=False, index=True)
    fullname = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Integer, nullable=False, default=ROLE_USER)
    salt = db.Column(db.String(64), nullable=False)
    hash = db.Column(db.String(512), nullable=False)

    @property
    def url(self):
        return f"/users/{self.id}"

    @staticmethod
    def _derive(password, salt):
        return hashlib.pbkdf2_hmac(
            'sha512', password.encode('utf-8'), salt.encode('utf-8'),
            PBKDF2_ITERATIONS, dklen=PBKDF2_KEY_LENGTH,
        ).hex()

    def set_password(self, password):
        self.salt = secrets.token_hex(16)
        self.hash = self._derive(password, self.salt)

    def validate_password(self, password):
        if not self.salt or not self.hash:
            return False
        return hmac.compare_digest(self.hash, self._derive(password, self.salt))

    @staticmethod
    def passwords_match(password, password_confirm):
        return password == password_confirm

    def to_dict(self):
        """Public view of the user; salt and hash are never included."""
        return {
            "id": self.id,
            "username": self.username,
            "fullname": self.fullname,
            "email": self.email,
            "role": self.role,
            "role_name": ROLE_NAMES.get(self.role, "Unknown"),
            "url": self.url,
        }

    def __repr__(self):
        return f"<User {self.username} role={self.role}>"
