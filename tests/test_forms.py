from datetime import date

import pytest

from locallibrary.forms import AuthorForm, DeleteForm, GenreForm, collect_errors, escape, parse_date, trim


def test_trim_and_escape_filters():
    assert trim("  Fantasy ") == "Fantasy"
    assert trim(None) is None
    assert escape("<script>x</script>") == "&lt;script&gt;x&lt;/script&gt;"
    assert escape("Fantasy") == "Fantasy"
    assert escape("") == ""


def test_escape_is_stable_on_escaped_text():
    once = escape("Tom & Jerry")
    assert once == "Tom &amp; Jerry"
    assert escape(once) == once


def test_escape_encodes_quotes():
    once = escape("O'Brien \"Jr\"")
    assert once == "O&#x27;Brien &quot;Jr&quot;"
    assert escape(once) == once


def test_parse_date_formats():
    assert parse_date("1920-01-02") == date(1920, 1, 2)
    assert parse_date("2 January 1920") == date(1920, 1, 2)
    with pytest.raises(ValueError):
        parse_date("notadate")
    with pytest.raises(ValueError):
        parse_date("   ")


def test_genre_form_sanitizes_input(app):
    with app.test_request_context("/", method="POST", data={"name": "  <i>Noir</i> "}):
        form = GenreForm()
        assert form.validate()
        assert form.name.data == "&lt;i&gt;Noir&lt;/i&gt;"


def test_genre_form_rejects_overlong_name(app):
    with app.test_request_context("/", method="POST", data={"name": "x" * 101}):
        form = GenreForm()
        assert not form.validate()
        assert [e["param"] for e in collect_errors(form)] == ["name"]


def test_author_form_reports_all_fields(app):
    with app.test_request_context("/", method="POST", data={}):
        form = AuthorForm()
        assert not form.validate()
        assert collect_errors(form) == [
            {"param": "first_name", "msg": "First name must be specified."},
            {"param": "family_name", "msg": "Family name must be specified."},
        ]


def test_author_form_blank_dates_are_unset(app):
    data = {"first_name": "Jim", "family_name": "Jones", "date_of_birth": " ", "date_of_death": ""}
    with app.test_request_context("/", method="POST", data=data):
        form = AuthorForm()
        assert form.validate()
        assert form.date_of_birth.data is None
        assert form.date_of_death.data is None


def test_delete_form_record_id(app):
    with app.test_request_context("/", method="POST", data={"id": "12"}):
        form = DeleteForm()
        assert form.validate()
        assert form.record_id() == 12
    with app.test_request_context("/", method="POST", data={"id": "abc"}):
        assert DeleteForm().record_id() is None
