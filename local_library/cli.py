from datetime import date

from .models import Author, Book, BookInstance, Genre, db


def seed_if_empty():
    """Create tables and add the sample catalog. Returns False if data already exists."""
    db.create_all()
    if Book.query.first() or Author.query.first() or Genre.query.first():
        return False

    fantasy = Genre(name="Fantasy")
    scifi = Genre(name="Science Fiction")
    poetry = Genre(name="French Poetry")

    rothfuss = Author(first_name="Patrick", family_name="Rothfuss", date_of_birth=date(1973, 6, 6))
    bova = Author(first_name="Ben", family_name="Bova", date_of_birth=date(1932, 11, 8))
    asimov = Author(first_name="Isaac", family_name="Asimov", date_of_birth=date(1920, 1, 2),
                    date_of_death=date(1992, 4, 6))
    billings = Author(first_name="Bob", family_name="Billings")
    jones = Author(first_name="Jim", family_name="Jones", date_of_birth=date(1971, 12, 16))
    db.session.add_all([fantasy, scifi, poetry, rothfuss, bova, asimov, billings, jones])

    books = [
        Book(title="The Name of the Wind (The Kingkiller Chronicle, #1)", isbn="9781473211896",
             author=rothfuss, genres=[fantasy],
             summary="I have stolen princesses back from sleeping barrow kings. I burned down the "
                     "town of Trebon. I have spent the night with Felurian and left with both my "
                     "sanity and my life. My name is Kvothe."),
        Book(title="The Wise Man's Fear (The Kingkiller Chronicle, #2)", isbn="9788401352836",
             author=rothfuss, genres=[fantasy],
             summary="Picking up the tale of Kvothe Kingkiller once again, we follow him into "
                     "exile, into political intrigue, courtship, adventure, love and magic."),
        Book(title="The Slow Regard of Silent Things (Kingkiller Chronicle)", isbn="9780756411336",
             author=rothfuss, genres=[fantasy],
             summary="Deep below the University, there is a dark place. Few people know of it: "
                     "a broken web of ancient passageways and abandoned rooms."),
        Book(title="Apes and Angels", isbn="9780765379528", author=bova, genres=[scifi],
             summary="Humankind headed out to the stars not for conquest, nor exploration, nor "
                     "even for curiosity. Humans went to the stars in a desperate crusade to save "
                     "intelligent life wherever they found it."),
        Book(title="Death Wave", isbn="9780765379504", author=bova, genres=[scifi],
             summary="In Ben Bova's previous novel New Earth, Jordan Kell led the first human "
                     "mission beyond the solar system."),
        Book(title="Test Book 1", isbn="ISBN111111", author=jones, genres=[fantasy, scifi],
             summary="Summary of test book 1"),
        Book(title="Test Book 2", isbn="ISBN222222", author=jones, genres=[],
             summary="Summary of test book 2"),
    ]
    db.session.add_all(books)

    tor = "New York Tom Doherty Associates, 2016."
    tor_llc = "New York, NY Tom Doherty Associates, LLC, 2015."
    copies = [
        BookInstance(book=books[0], imprint="London Gollancz, 2014.", status="Available"),
        BookInstance(book=books[1], imprint="Gollancz, 2011.", status="Loaned"),
        BookInstance(book=books[2], imprint="Gollancz, 2015."),
        BookInstance(book=books[3], imprint=tor, status="Available"),
        BookInstance(book=books[3], imprint=tor, status="Available"),
        BookInstance(book=books[3], imprint=tor, status="Available"),
        BookInstance(book=books[4], imprint=tor_llc, status="Available"),
        BookInstance(book=books[4], imprint=tor_llc, status="Maintenance"),
        BookInstance(book=books[4], imprint=tor_llc, status="Loaned"),
        BookInstance(book=books[0], imprint="Imprint XXX2"),
        BookInstance(book=books[1], imprint="Imprint XXX3"),
    ]
    db.session.add_all(copies)
    db.session.commit()
    return True


def register_commands(app):

    @app.cli.command("init-db")
    def init_db():
        """Create the database tables."""
        db.create_all()
        print("Initialized the database.")

    @app.cli.command("populate-db")
    def populate_db():
        """Create the tables and add sample data (for dev only)."""
        if seed_if_empty():
            print("Initialized DB with sample data.")
        else:
            print("DB already initialized.")
