import logging

from flask import render_template, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db

log = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(e):
        if e.code >= 500:
            log.error("%s %s -> %s", request.method, request.path, e.code)
        return render_template('error.html', title=e.name, message=e.description, status=e.code), e.code

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        log.exception("database error on %s %s", request.method, request.path)
        return render_template('error.html', title='Database Error',
                               message='The catalog could not be read or updated. Please try again later.',
                               status=500), 500
