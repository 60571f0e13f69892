import logging

from .errors import IntegrityBlocked
from .models import Book, BookInstance, Genre, db

logger = logging.getLogger(__name__)


class DeleteGuard:
    """Confirm-then-delete flow that refuses while dependents exist.

    ``dependents`` is a callable taking the entity id and returning a fresh
    query of the records that reference it (or None for leaf entities).  Both
    ``confirm`` and ``delete`` run that query again; nothing is carried over
    from the confirmation page.
    """

    def __init__(self, model, dependents=None):
        self.model = model
        self.dependents = dependents

    def _load_dependents(self, entity_id):
        if self.dependents is None:
            return []
        return self.dependents(entity_id).all()

    def confirm(self, entity_id):
        entity = db.get_or_404(self.model, entity_id)
        return entity, self._load_dependents(entity_id)

    def delete(self, entity_id):
        """Delete the entity. Returns False if it was already gone."""
        entity = db.session.get(self.model, entity_id)
        if entity is None:
            return False
        dependents = self._load_dependents(entity_id)
        if len(dependents) > 0:
            raise IntegrityBlocked(entity, dependents)
        db.session.delete(entity)
        db.session.commit()
        logger.info("Deleted %s %s", self.model.__name__, entity_id)
        return True


def books_by_author(author_id):
    return Book.query.filter(Book.author_id == author_id).order_by(Book.title)


def books_by_genre(genre_id):
    return Book.query.filter(Book.genres.any(Genre.id == genre_id)).order_by(Book.title)


def copies_of_book(book_id):
    return BookInstance.query.filter(BookInstance.book_id == book_id).order_by(BookInstance.id)
