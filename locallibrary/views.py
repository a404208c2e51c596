"""Catalog request handlers.

``create_blueprint`` builds the ``catalog`` blueprint around the
repositories and the fetch join; the route functions close over them, so
nothing is looked up from a global registry.
"""

import logging
from datetime import date

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from .forms import AuthorForm, BookForm, BookInstanceForm, DeleteForm, GenreForm, collect_errors
from .models import Author, Book, BookInstance, Genre

log = logging.getLogger(__name__)

GENRE_FIELDS = ('name',)
AUTHOR_FIELDS = ('first_name', 'family_name', 'date_of_birth', 'date_of_death')
BOOK_FIELDS = ('title', 'author_id', 'summary', 'isbn', 'genre_id')
BOOK_INSTANCE_FIELDS = ('book_id', 'imprint', 'status', 'due_back')


def form_values(form, *names):
    return {name: form[name].data for name in names}


def book_instance_values(form):
    values = form_values(form, *BOOK_INSTANCE_FIELDS)
    values['due_back'] = values['due_back'] or date.today()
    return values


def create_blueprint(repos, fetch) -> Blueprint:
    bp = Blueprint('catalog', __name__, url_prefix='/catalog')

    @bp.route('/')
    def index():
        counts = fetch(
            book_count=repos.books.count,
            book_instance_count=repos.book_instances.count,
            book_instance_available_count=lambda: repos.book_instances.count(status='Available'),
            author_count=repos.authors.count,
            genre_count=repos.genres.count,
        )
        return render_template('index.html', title='Local Library Home', data=counts)

    register_genre_views(bp, repos, fetch)
    register_author_views(bp, repos, fetch)
    register_book_views(bp, repos, fetch)
    register_book_instance_views(bp, repos)
    return bp


# ---------------------------
# Genres
# ---------------------------
def register_genre_views(bp, repos, fetch):
    def genre_with_books(id):
        return fetch(
            genre=lambda: repos.genres.find_by_id(id),
            genre_books=lambda: repos.books.find(genre_id=id, order_by=Book.title),
        )

    @bp.route('/genres')
    def genre_list():
        genres = repos.genres.find(order_by=Genre.name)
        return render_template('genre_list.html', title='Genre List', genre_list=genres)

    @bp.route('/genre/<int:id>')
    def genre_detail(id):
        results = genre_with_books(id)
        if results.genre is None:
            abort(404, description='Genre not found')
        return render_template('genre_detail.html', title='Genre Detail',
                               genre=results.genre, genre_books=results.genre_books)

    @bp.route('/genre/create', methods=['GET', 'POST'])
    def genre_create():
        if request.method == 'GET':
            return render_template('genre_form.html', title='Create Genre', form=GenreForm())

        form = GenreForm()
        genre = Genre(**form_values(form, *GENRE_FIELDS))
        if not form.validate():
            return render_template('genre_form.html', title='Create Genre', form=form,
                                   genre=genre, errors=collect_errors(form))

        # Creating an existing name is a no-op that lands on the existing genre
        found = repos.genres.find_one(name=genre.name)
        if found is not None:
            return redirect(found.url)
        repos.genres.create(genre)
        flash("Genre created", "success")
        return redirect(genre.url)

    @bp.route('/genre/<int:id>/update', methods=['GET', 'POST'])
    def genre_update(id):
        if request.method == 'GET':
            genre = repos.genres.find_by_id(id)
            if genre is None:
                abort(404, description='Genre not found')
            return render_template('genre_form.html', title='Update Genre', form=GenreForm(obj=genre), genre=genre)

        form = GenreForm()
        values = form_values(form, *GENRE_FIELDS)
        if not form.validate():
            return render_template('genre_form.html', title='Update Genre', form=form,
                                   genre=Genre(id=id, **values), errors=collect_errors(form))

        genre = repos.genres.update_by_id(id, values)
        if genre is None:
            abort(404, description='Genre not found')
        flash("Genre updated", "success")
        return redirect(genre.url)

    @bp.route('/genre/<int:id>/delete', methods=['GET', 'POST'])
    def genre_delete(id):
        results = genre_with_books(id)
        if request.method == 'GET':
            if results.genre is None:
                return redirect(url_for('catalog.genre_list'))
            form = DeleteForm(id=id)
        else:
            form = DeleteForm()
            if not results.genre_books:
                if not form.validate():
                    abort(400, description='Missing genre id')
                repos.genres.delete_by_id(form.record_id())
                flash("Genre deleted", "success")
                return redirect(url_for('catalog.genre_list'))
            log.info("refusing to delete genre %s: %d books reference it", id, len(results.genre_books))

        return render_template('genre_delete.html', title='Delete Genre', form=form,
                               genre=results.genre, genre_books=results.genre_books)


# ---------------------------
# Authors
# ---------------------------
def register_author_views(bp, repos, fetch):
    def author_with_books(id):
        return fetch(
            author=lambda: repos.authors.find_by_id(id),
            author_books=lambda: repos.books.find(author_id=id, order_by=Book.title),
        )

    @bp.route('/authors')
    def author_list():
        authors = repos.authors.find(order_by=[Author.family_name, Author.first_name])
        return render_template('author_list.html', title='Author List', author_list=authors)

    @bp.route('/author/<int:id>')
    def author_detail(id):
        results = author_with_books(id)
        if results.author is None:
            abort(404, description='Author not found')
        return render_template('author_detail.html', title='Author Detail',
                               author=results.author, author_books=results.author_books)

    @bp.route('/author/create', methods=['GET', 'POST'])
    def author_create():
        if request.method == 'GET':
            return render_template('author_form.html', title='Create Author', form=AuthorForm())

        form = AuthorForm()
        author = Author(**form_values(form, *AUTHOR_FIELDS))
        if not form.validate():
            return render_template('author_form.html', title='Create Author', form=form,
                                   author=author, errors=collect_errors(form))
        repos.authors.create(author)
        flash("Author created", "success")
        return redirect(author.url)

    @bp.route('/author/<int:id>/update', methods=['GET', 'POST'])
    def author_update(id):
        if request.method == 'GET':
            author = repos.authors.find_by_id(id)
            if author is None:
                abort(404, description='Author not found')
            return render_template('author_form.html', title='Update Author',
                                   form=AuthorForm(obj=author), author=author)

        form = AuthorForm()
        values = form_values(form, *AUTHOR_FIELDS)
        if not form.validate():
            return render_template('author_form.html', title='Update Author', form=form,
                                   author=Author(id=id, **values), errors=collect_errors(form))

        author = repos.authors.update_by_id(id, values)
        if author is None:
            abort(404, description='Author not found')
        flash("Author updated", "success")
        return redirect(author.url)

    @bp.route('/author/<int:id>/delete', methods=['GET', 'POST'])
    def author_delete(id):
        results = author_with_books(id)
        if request.method == 'GET':
            if results.author is None:
                return redirect(url_for('catalog.author_list'))
            form = DeleteForm(id=id)
        else:
            form = DeleteForm()
            if not results.author_books:
                if not form.validate():
                    abort(400, description='Missing author id')
                repos.authors.delete_by_id(form.record_id())
                flash("Author deleted", "success")
                return redirect(url_for('catalog.author_list'))
            log.info("refusing to delete author %s: %d books reference it", id, len(results.author_books))

        return render_template('author_delete.html', title='Delete Author', form=form,
                               author=results.author, author_books=results.author_books)


# ---------------------------
# Books
# ---------------------------
def register_book_views(bp, repos, fetch):
    def book_with_copies(id):
        return fetch(
            book=lambda: repos.books.find_by_id(id),
            book_instances=lambda: repos.book_instances.find(book_id=id, order_by=BookInstance.id),
        )

    def choices(**extra):
        return fetch(
            authors=lambda: repos.authors.find(order_by=[Author.family_name, Author.first_name]),
            genres=lambda: repos.genres.find(order_by=Genre.name),
            **extra,
        )

    def bound_form(results, **kwargs):
        form = BookForm(**kwargs)
        form.set_choices(results.authors, results.genres)
        return form

    @bp.route('/books')
    def book_list():
        books = repos.books.find(order_by=Book.title)
        return render_template('book_list.html', title='Book List', book_list=books)

    @bp.route('/book/<int:id>')
    def book_detail(id):
        results = book_with_copies(id)
        if results.book is None:
            abort(404, description='Book not found')
        return render_template('book_detail.html', title=results.book.title,
                               book=results.book, book_instances=results.book_instances)

    @bp.route('/book/create', methods=['GET', 'POST'])
    def book_create():
        form = bound_form(choices())
        if request.method == 'GET':
            return render_template('book_form.html', title='Create Book', form=form)

        book = Book(**form_values(form, *BOOK_FIELDS))
        if not form.validate():
            return render_template('book_form.html', title='Create Book', form=form,
                                   book=book, errors=collect_errors(form))
        repos.books.create(book)
        flash("Book created", "success")
        return redirect(book.url)

    @bp.route('/book/<int:id>/update', methods=['GET', 'POST'])
    def book_update(id):
        if request.method == 'GET':
            results = choices(book=lambda: repos.books.find_by_id(id))
            if results.book is None:
                abort(404, description='Book not found')
            form = bound_form(results, obj=results.book)
            return render_template('book_form.html', title='Update Book', form=form, book=results.book)

        form = bound_form(choices())
        values = form_values(form, *BOOK_FIELDS)
        if not form.validate():
            return render_template('book_form.html', title='Update Book', form=form,
                                   book=Book(id=id, **values), errors=collect_errors(form))

        book = repos.books.update_by_id(id, values)
        if book is None:
            abort(404, description='Book not found')
        flash("Book updated", "success")
        return redirect(book.url)

    @bp.route('/book/<int:id>/delete', methods=['GET', 'POST'])
    def book_delete(id):
        results = book_with_copies(id)
        if request.method == 'GET':
            if results.book is None:
                return redirect(url_for('catalog.book_list'))
            form = DeleteForm(id=id)
        else:
            form = DeleteForm()
            if not results.book_instances:
                if not form.validate():
                    abort(400, description='Missing book id')
                repos.books.delete_by_id(form.record_id())
                flash("Book deleted", "success")
                return redirect(url_for('catalog.book_list'))
            log.info("refusing to delete book %s: %d copies reference it", id, len(results.book_instances))

        return render_template('book_delete.html', title='Delete Book', form=form,
                               book=results.book, book_instances=results.book_instances)


# ---------------------------
# Book instances (copies)
# ---------------------------
def register_book_instance_views(bp, repos):
    def bound_form(**kwargs):
        form = BookInstanceForm(**kwargs)
        form.set_choices(repos.books.find(order_by=Book.title))
        return form

    @bp.route('/bookinstances')
    def bookinstance_list():
        instances = repos.book_instances.find(order_by=BookInstance.id)
        return render_template('bookinstance_list.html', title='Book Instance List', bookinstance_list=instances)

    @bp.route('/bookinstance/<int:id>')
    def bookinstance_detail(id):
        instance = repos.book_instances.find_by_id(id)
        if instance is None:
            abort(404, description='Book copy not found')
        return render_template('bookinstance_detail.html', title='Copy: ' + instance.book.title,
                               bookinstance=instance)

    @bp.route('/bookinstance/create', methods=['GET', 'POST'])
    def bookinstance_create():
        form = bound_form()
        if request.method == 'GET':
            return render_template('bookinstance_form.html', title='Create BookInstance', form=form)

        if not form.validate():
            instance = BookInstance(**form_values(form, *BOOK_INSTANCE_FIELDS))
            return render_template('bookinstance_form.html', title='Create BookInstance', form=form,
                                   bookinstance=instance, errors=collect_errors(form))
        instance = repos.book_instances.create(BookInstance(**book_instance_values(form)))
        flash("Copy created", "success")
        return redirect(instance.url)

    @bp.route('/bookinstance/<int:id>/update', methods=['GET', 'POST'])
    def bookinstance_update(id):
        if request.method == 'GET':
            instance = repos.book_instances.find_by_id(id)
            if instance is None:
                abort(404, description='Book copy not found')
            return render_template('bookinstance_form.html', title='Update BookInstance',
                                   form=bound_form(obj=instance), bookinstance=instance)

        form = bound_form()
        if not form.validate():
            instance = BookInstance(id=id, **form_values(form, *BOOK_INSTANCE_FIELDS))
            return render_template('bookinstance_form.html', title='Update BookInstance', form=form,
                                   bookinstance=instance, errors=collect_errors(form))

        instance = repos.book_instances.update_by_id(id, book_instance_values(form))
        if instance is None:
            abort(404, description='Book copy not found')
        flash("Copy updated", "success")
        return redirect(instance.url)

    @bp.route('/bookinstance/<int:id>/delete', methods=['GET', 'POST'])
    def bookinstance_delete(id):
        if request.method == 'GET':
            instance = repos.book_instances.find_by_id(id)
            if instance is None:
                return redirect(url_for('catalog.bookinstance_list'))
            return render_template('bookinstance_delete.html', title='Delete BookInstance',
                                   bookinstance=instance, form=DeleteForm(id=id))

        form = DeleteForm()
        if not form.validate():
            abort(400, description='Missing copy id')
        repos.book_instances.delete_by_id(form.record_id())
        flash("Copy deleted", "success")
        return redirect(url_for('catalog.bookinstance_list'))
