import logging
from datetime import date
from math import ceil

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from .errors import IntegrityBlocked
from .forms import (
    AuthorForm, BookForm, BookInstanceForm, GenreForm, form_failures, parse_form_date
)
from .guard import DeleteGuard, books_by_author, books_by_genre, copies_of_book
from .models import Author, Book, BookInstance, Genre, db

logger = logging.getLogger(__name__)

bp = Blueprint("catalog", __name__, url_prefix="/catalog")

author_guard = DeleteGuard(Author, books_by_author)
genre_guard = DeleteGuard(Genre, books_by_genre)
book_guard = DeleteGuard(Book, copies_of_book)
bookinstance_guard = DeleteGuard(BookInstance)

PAGE_LINK_RADIUS = 5


def paginate_query(query):
    """Return a dict of template variables for one page of ``query``."""
    per_page = current_app.config["PAGE_SIZE"]
    try:
        page = int(request.args.get("page", 1))
    except ValueError:
        page = 1
    page = max(page, 1)

    total = query.count()
    total_pages = max(1, ceil(total / per_page))
    if page > total_pages:
        page = total_pages

    items = query.offset((page - 1) * per_page).limit(per_page).all()
    # numbered links for a window around the current page
    first = max(1, page - PAGE_LINK_RADIUS)
    last = min(total_pages, page + PAGE_LINK_RADIUS)
    pages = list(range(first, last + 1))
    return {"items": items, "page": page, "pages": pages, "total_pages": total_pages, "total": total}


def confirm_or_delete(guard, entity_id, template, title, entity_key, dependents_key, list_endpoint):
    """Shared GET-confirm / POST-delete flow of the four delete pages."""
    if request.method == "POST":
        try:
            deleted = guard.delete(entity_id)
        except IntegrityBlocked as blocked:
            context = {entity_key: blocked.entity}
            if dependents_key:
                context[dependents_key] = blocked.dependents
            return render_template(template, title=title, **context)
        if deleted:
            flash(f"{guard.model.__name__} deleted", "success")
        return redirect(url_for(list_endpoint))

    entity, dependents = guard.confirm(entity_id)
    context = {entity_key: entity}
    if dependents_key:
        context[dependents_key] = dependents
    return render_template(template, title=title, **context)


# --------------------
# Home
# --------------------
@bp.route("")
def index():
    counts = {
        "books": Book.query.count(),
        "copies": BookInstance.query.count(),
        "copies_available": BookInstance.query.filter_by(status="Available").count(),
        "authors": Author.query.count(),
        "genres": Genre.query.count(),
    }
    return render_template("index.html", title="Local Library Home", counts=counts)


# --------------------
# Authors
# --------------------
def _author_data(author):
    return {
        "first_name": author.first_name,
        "family_name": author.family_name,
        "date_of_birth": author.date_of_birth_yyyy_mm_dd,
        "date_of_death": author.date_of_death_yyyy_mm_dd,
    }


def _apply_author(author, form):
    author.first_name = form.first_name.data
    author.family_name = form.family_name.data
    author.date_of_birth = parse_form_date(form.date_of_birth.data)
    author.date_of_death = parse_form_date(form.date_of_death.data)


@bp.route("/authors")
def author_list():
    query = Author.query.order_by(Author.family_name, Author.first_name)
    return render_template("author_list.html", title="Author List", **paginate_query(query))


@bp.route("/author/create", methods=["GET", "POST"])
def author_create():
    form = AuthorForm()
    if form.validate_on_submit():
        author = Author()
        _apply_author(author, form)
        db.session.add(author)
        db.session.commit()
        logger.info("Created author %s", author.id)
        return redirect(author.url)
    return render_template("author_form.html", title="Create Author", form=form,
                           failures=form_failures(form))


@bp.route("/author/<id:author_id>")
def author_detail(author_id):
    author = db.get_or_404(Author, author_id)
    return render_template("author_detail.html", title="Author Detail", author=author,
                           author_books=books_by_author(author_id).all())


@bp.route("/author/<id:author_id>/update", methods=["GET", "POST"])
def author_update(author_id):
    author = db.get_or_404(Author, author_id)
    if request.method == "GET":
        form = AuthorForm(data=_author_data(author))
    else:
        form = AuthorForm()
    if form.validate_on_submit():
        _apply_author(author, form)
        db.session.commit()
        return redirect(author.url)
    return render_template("author_form.html", title="Update Author", form=form,
                           failures=form_failures(form))


@bp.route("/author/<id:author_id>/delete", methods=["GET", "POST"])
def author_delete(author_id):
    return confirm_or_delete(author_guard, author_id, "author_delete.html", "Delete Author",
                             "author", "author_books", "catalog.author_list")


# --------------------
# Genres
# --------------------
@bp.route("/genres")
def genre_list():
    query = Genre.query.order_by(Genre.name)
    return render_template("genre_list.html", title="Genre List", **paginate_query(query))


@bp.route("/genre/create", methods=["GET", "POST"])
def genre_create():
    form = GenreForm()
    if form.validate_on_submit():
        existing = Genre.query.filter(Genre.name == form.name.data).order_by(Genre.id).first()
        if existing is not None:
            return redirect(existing.url)
        genre = Genre(name=form.name.data)
        db.session.add(genre)
        db.session.commit()
        logger.info("Created genre %s", genre.id)
        return redirect(genre.url)
    return render_template("genre_form.html", title="Create Genre", form=form,
                           failures=form_failures(form))


@bp.route("/genre/<id:genre_id>")
def genre_detail(genre_id):
    genre = db.get_or_404(Genre, genre_id)
    return render_template("genre_detail.html", title="Genre Detail", genre=genre,
                           genre_books=books_by_genre(genre_id).all())


@bp.route("/genre/<id:genre_id>/update", methods=["GET", "POST"])
def genre_update(genre_id):
    genre = db.get_or_404(Genre, genre_id)
    if request.method == "GET":
        form = GenreForm(data={"name": genre.name})
    else:
        form = GenreForm()
    if form.validate_on_submit():
        genre.name = form.name.data
        db.session.commit()
        return redirect(genre.url)
    return render_template("genre_form.html", title="Update Genre", form=form,
                           failures=form_failures(form))


@bp.route("/genre/<id:genre_id>/delete", methods=["GET", "POST"])
def genre_delete(genre_id):
    return confirm_or_delete(genre_guard, genre_id, "genre_delete.html", "Delete Genre",
                             "genre", "genre_books", "catalog.genre_list")


# --------------------
# Books
# --------------------
def _book_form(data=None):
    """BookForm with its genre choices filled from the store."""
    genres = Genre.query.order_by(Genre.name).all()
    form = BookForm(data=data)
    form.genre.choices = [(g.id, g.name) for g in genres]
    return form, genres


def _apply_book(book, form):
    book.title = form.title.data
    book.author_id = int(form.author.data)
    book.summary = form.summary.data
    book.isbn = form.isbn.data
    genre_ids = form.genre.data or []
    book.genres = Genre.query.filter(Genre.id.in_(genre_ids)).all() if genre_ids else []


def _render_book_form(title, form, genres):
    authors = Author.query.order_by(Author.family_name, Author.first_name).all()
    return render_template("book_form.html", title=title, form=form, authors=authors,
                           genres=genres, failures=form_failures(form))


@bp.route("/books")
def book_list():
    query = Book.query.order_by(Book.title)
    return render_template("book_list.html", title="Book List", **paginate_query(query))


@bp.route("/book/create", methods=["GET", "POST"])
def book_create():
    form, genres = _book_form()
    if form.validate_on_submit():
        book = Book()
        _apply_book(book, form)
        db.session.add(book)
        db.session.commit()
        logger.info("Created book %s", book.id)
        return redirect(book.url)
    return _render_book_form("Create Book", form, genres)


@bp.route("/book/<id:book_id>")
def book_detail(book_id):
    book = db.get_or_404(Book, book_id)
    return render_template("book_detail.html", title=book.title, book=book,
                           book_instances=copies_of_book(book_id).all())


@bp.route("/book/<id:book_id>/update", methods=["GET", "POST"])
def book_update(book_id):
    book = db.get_or_404(Book, book_id)
    data = None
    if request.method == "GET":
        data = {
            "title": book.title,
            "author": str(book.author_id),
            "summary": book.summary,
            "isbn": book.isbn,
            "genre": [g.id for g in book.genres],
        }
    form, genres = _book_form(data)
    if form.validate_on_submit():
        _apply_book(book, form)
        db.session.commit()
        return redirect(book.url)
    return _render_book_form("Update Book", form, genres)


@bp.route("/book/<id:book_id>/delete", methods=["GET", "POST"])
def book_delete(book_id):
    return confirm_or_delete(book_guard, book_id, "book_delete.html", "Delete Book",
                             "book", "book_instances", "catalog.book_list")


# --------------------
# Book instances
# --------------------
def _apply_bookinstance(bookinstance, form):
    bookinstance.book_id = int(form.book.data)
    bookinstance.imprint = form.imprint.data
    bookinstance.status = form.status.data
    # no due date given means due today
    bookinstance.due_back = parse_form_date(form.due_back.data) or date.today()


def _render_bookinstance_form(title, form):
    books = Book.query.order_by(Book.title).all()
    return render_template("bookinstance_form.html", title=title, form=form, books=books,
                           failures=form_failures(form))


@bp.route("/bookinstances")
def bookinstance_list():
    query = BookInstance.query.order_by(BookInstance.id)
    return render_template("bookinstance_list.html", title="Book Instance List",
                           **paginate_query(query))


@bp.route("/bookinstance/create", methods=["GET", "POST"])
def bookinstance_create():
    form = BookInstanceForm()
    if form.validate_on_submit():
        bookinstance = BookInstance()
        _apply_bookinstance(bookinstance, form)
        db.session.add(bookinstance)
        db.session.commit()
        logger.info("Created book instance %s", bookinstance.id)
        return redirect(bookinstance.url)
    return _render_bookinstance_form("Create BookInstance", form)


@bp.route("/bookinstance/<id:bookinstance_id>")
def bookinstance_detail(bookinstance_id):
    bookinstance = db.get_or_404(BookInstance, bookinstance_id)
    return render_template("bookinstance_detail.html", title="Book Instance Detail",
                           bookinstance=bookinstance)


@bp.route("/bookinstance/<id:bookinstance_id>/update", methods=["GET", "POST"])
def bookinstance_update(bookinstance_id):
    bookinstance = db.get_or_404(BookInstance, bookinstance_id)
    if request.method == "GET":
        form = BookInstanceForm(data={
            "book": str(bookinstance.book_id),
            "imprint": bookinstance.imprint,
            "status": bookinstance.status,
            "due_back": bookinstance.due_back_yyyy_mm_dd,
        })
    else:
        form = BookInstanceForm()
    if form.validate_on_submit():
        _apply_bookinstance(bookinstance, form)
        db.session.commit()
        return redirect(bookinstance.url)
    return _render_bookinstance_form("Update BookInstance", form)


@bp.route("/bookinstance/<id:bookinstance_id>/delete", methods=["GET", "POST"])
def bookinstance_delete(bookinstance_id):
    return confirm_or_delete(bookinstance_guard, bookinstance_id, "bookinstance_delete.html",
                             "Delete BookInstance", "bookinstance", None,
                             "catalog.bookinstance_list")
