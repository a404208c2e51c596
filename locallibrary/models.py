from datetime import date
from typing import Optional

from .extensions import db

BOOK_INSTANCE_STATUSES = ['Available', 'Maintenance', 'Loaned', 'Reserved']


def format_date(value: Optional[date]) -> str:
    """Medium date form, e.g. ``Oct 14, 1983``; empty string when unset."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


class Genre(db.Model):
    __tablename__ = 'genres'
    id = db.Column(db.Integer, primary_key=True)
    # Uniqueness is checked by the create handler, not by a constraint
    name = db.Column(db.String(100), nullable=False, index=True)

    books = db.relationship('Book', back_populates='genre')

    @property
    def url(self):
        return f"/catalog/genre/{self.id}"

    def __repr__(self):
        return f"<Genre {self.id} {self.name!r}>"


class Author(db.Model):
    __tablename__ = 'authors'
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False, index=True)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    books = db.relationship('Book', back_populates='author')

    @property
    def name(self):
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self):
        return f"/catalog/author/{self.id}"

    @property
    def date_of_birth_formatted(self):
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self):
        return format_date(self.date_of_death)

    @property
    def lifespan(self):
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"

    def __repr__(self):
        return f"<Author {self.id} {self.name!r}>"


class Book(db.Model):
    __tablename__ = 'books'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(250), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey('authors.id'), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(32), nullable=False)
    genre_id = db.Column(db.Integer, db.ForeignKey('genres.id'), nullable=False)

    # Joined so that records fetched on a worker thread render after their session closes
    author = db.relationship('Author', back_populates='books', lazy='joined')
    genre = db.relationship('Genre', back_populates='books', lazy='joined')
    instances = db.relationship('BookInstance', back_populates='book')

    @property
    def url(self):
        return f"/catalog/book/{self.id}"

    def __repr__(self):
        return f"<Book {self.id} {self.title!r}>"


class BookInstance(db.Model):
    __tablename__ = 'book_instances'
    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey('books.id'), nullable=False)
    imprint = db.Column(db.String(250), nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Maintenance', index=True)
    due_back = db.Column(db.Date, nullable=False, default=date.today)

    book = db.relationship('Book', back_populates='instances', lazy='joined')

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self):
        return format_date(self.due_back)

    def __repr__(self):
        return f"<BookInstance {self.id} {self.status}>"
