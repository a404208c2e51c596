from datetime import datetime, date
from typing import Dict, List, Optional

import bleach
from dateutil.parser import parse as dateparse
from flask_wtf import FlaskForm
from wtforms import DateField, HiddenField, SelectField, StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length, Optional as OptionalValidator, Regexp, ValidationError

from .models import BOOK_INSTANCE_STATUSES


# --- Sanitising filters ---
def trim(value):
    return value.strip() if isinstance(value, str) else value


QUOTE_ENTITIES = {'"': "&quot;", "'": "&#x27;"}


def escape(value):
    # bleach leaves existing entities alone, so re-escaping stored values is a no-op
    if not value or not isinstance(value, str):
        return value
    cleaned = bleach.clean(value, tags=set(), strip=False)
    return "".join(QUOTE_ENTITIES.get(char, char) for char in cleaned)


SANITIZE = [trim, escape]


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD`` first, then anything dateutil understands."""
    s = value.strip()
    if not s:
        raise ValueError("Empty date")
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        pass
    try:
        return dateparse(s).date()
    except (ValueError, OverflowError):
        raise ValueError(f"Invalid date: {value!r}")


class LenientDateField(DateField):
    """Date input accepting ISO dates or other unambiguous forms; blank means unset."""

    def __init__(self, label=None, validators=None, invalid_message="Invalid date", **kwargs):
        super().__init__(label, validators, format="%Y-%m-%d", **kwargs)
        self.invalid_message = invalid_message

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = " ".join(valuelist).strip()
        if not raw:
            self.data = None
            return
        try:
            self.data = parse_date(raw)
        except ValueError:
            self.data = None
            raise ValueError(self.invalid_message)


def collect_errors(form) -> List[Dict[str, str]]:
    """Flatten form errors into ``[{"param": field, "msg": message}, ...]`` in field order."""
    errors = []
    for field in form:
        for message in field.errors:
            errors.append({"param": field.name, "msg": message})
    return errors


# --- Forms ---
class GenreForm(FlaskForm):
    name = StringField('Genre', filters=SANITIZE,
                       validators=[DataRequired('Genre name required'), Length(max=100)])
    submit = SubmitField('Submit')


class AuthorForm(FlaskForm):
    first_name = StringField('First Name', filters=SANITIZE, validators=[
        DataRequired('First name must be specified.'),
        Length(max=100),
        Regexp(r'^[A-Za-z0-9]+$', message='First name has non-alphanumeric characters.'),
    ])
    family_name = StringField('Family Name', filters=SANITIZE, validators=[
        DataRequired('Family name must be specified.'),
        Length(max=100),
        Regexp(r'^[A-Za-z0-9]+$', message='Family name has non-alphanumeric characters.'),
    ])
    date_of_birth = LenientDateField('Date of birth', validators=[OptionalValidator()],
                                     invalid_message='Invalid date of birth')
    date_of_death = LenientDateField('Date of death', validators=[OptionalValidator()],
                                     invalid_message='Invalid date of death')
    submit = SubmitField('Submit')

    def validate_date_of_death(form, field):
        born = form.date_of_birth.data
        if field.data and born and field.data < born:
            raise ValidationError('Date of death must not be before date of birth.')


class BookForm(FlaskForm):
    title = StringField('Title', filters=SANITIZE,
                        validators=[DataRequired('Title must not be empty.'), Length(max=250)])
    author_id = SelectField('Author', coerce=int, validators=[DataRequired('Author must be specified.')])
    summary = TextAreaField('Summary', filters=SANITIZE,
                            validators=[DataRequired('Summary must not be empty.'), Length(max=5000)])
    isbn = StringField('ISBN', filters=SANITIZE,
                       validators=[DataRequired('ISBN must not be empty.'), Length(max=32)])
    genre_id = SelectField('Genre', coerce=int, validators=[DataRequired('Genre must be specified.')])
    submit = SubmitField('Submit')

    def set_choices(self, authors, genres):
        self.author_id.choices = [(a.id, a.name) for a in authors]
        self.genre_id.choices = [(g.id, g.name) for g in genres]


class BookInstanceForm(FlaskForm):
    book_id = SelectField('Book', coerce=int, validators=[DataRequired('Book must be specified.')])
    imprint = StringField('Imprint', filters=SANITIZE,
                          validators=[DataRequired('Imprint must be specified.'), Length(max=250)])
    status = SelectField('Status', choices=[(s, s) for s in BOOK_INSTANCE_STATUSES], default='Maintenance')
    due_back = LenientDateField('Date when book available', validators=[OptionalValidator()],
                                invalid_message='Invalid date')
    submit = SubmitField('Submit')

    def set_choices(self, books):
        self.book_id.choices = [(b.id, b.title) for b in books]


class DeleteForm(FlaskForm):
    id = HiddenField('id', validators=[DataRequired()])
    submit = SubmitField('Delete')

    def record_id(self) -> Optional[int]:
        try:
            return int(self.id.data)
        except (TypeError, ValueError):
            return None
