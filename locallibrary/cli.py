from datetime import date

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Author, Book, BookInstance, Genre


def seed_sample_data(repos):
    """Load a handful of authors, genres, books and copies (for dev only)."""
    rothfuss = repos.authors.create(Author(first_name="Patrick", family_name="Rothfuss",
                                           date_of_birth=date(1973, 6, 6)))
    bova = repos.authors.create(Author(first_name="Ben", family_name="Bova",
                                       date_of_birth=date(1932, 11, 8)))
    asimov = repos.authors.create(Author(first_name="Isaac", family_name="Asimov",
                                         date_of_birth=date(1920, 1, 2), date_of_death=date(1992, 4, 6)))

    fantasy = repos.genres.create(Genre(name="Fantasy"))
    scifi = repos.genres.create(Genre(name="Science Fiction"))
    repos.genres.create(Genre(name="French Poetry"))

    wind = repos.books.create(Book(
        title="The Name of the Wind (The Kingkiller Chronicle, #1)",
        summary="I have stolen princesses back from sleeping barrow kings.",
        isbn="9781473211896", author_id=rothfuss.id, genre_id=fantasy.id))
    fear = repos.books.create(Book(
        title="The Wise Man's Fear (The Kingkiller Chronicle, #2)",
        summary="Picking up the tale of Kvothe Kingkiller once again.",
        isbn="9788401352836", author_id=rothfuss.id, genre_id=fantasy.id))
    apes = repos.books.create(Book(
        title="Apes and Angels",
        summary="Humankind headed out to the stars not for conquest, nor exploration.",
        isbn="9780765379528", author_id=bova.id, genre_id=scifi.id))
    repos.books.create(Book(
        title="Foundation",
        summary="The Galactic Empire has prospered for twelve thousand years.",
        isbn="9780553293357", author_id=asimov.id, genre_id=scifi.id))

    repos.book_instances.create(BookInstance(book_id=wind.id, imprint="London Gollancz, 2014.", status="Available"))
    repos.book_instances.create(BookInstance(book_id=fear.id, imprint="Gollancz, 2011.", status="Loaned",
                                             due_back=date(2020, 10, 20)))
    repos.book_instances.create(BookInstance(book_id=apes.id, imprint="New York Tom Doherty Associates, 2016.",
                                             status="Available"))
    repos.book_instances.create(BookInstance(book_id=apes.id, imprint="New York Tom Doherty Associates, 2016.",
                                             status="Maintenance"))


@click.command("init-db")
@click.option("--seed/--no-seed", default=True, help="Load sample data when the catalog is empty.")
@with_appcontext
def init_db_command(seed):
    """Create the catalog tables and optionally add sample data."""
    db.create_all()
    repos = current_app.extensions['locallibrary']['repos']
    if seed and not repos.authors.count():
        seed_sample_data(repos)
        click.echo("Initialized database with sample data.")
    else:
        click.echo("Database initialized.")
