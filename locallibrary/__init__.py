"""Local library catalog: a server-rendered Flask site for browsing and
editing genres, authors, books and their copies."""

from collections.abc import Mapping

from flask import Flask, redirect, url_for

from .cli import init_db_command
from .config import Config, apply_engine_defaults
from .errors import register_error_handlers
from .extensions import csrf, db, talisman
from .log import configure_logging
from .parallel import Fetcher
from .repositories import Repositories
from .views import create_blueprint

CONTENT_SECURITY_POLICY = {
    'default-src': ["'self'"],
    'style-src': ["'self'", "'unsafe-inline'"],
}


def create_app(config=None):
    app = Flask(__name__, template_folder="templates")
    app.config.from_object(Config)
    if isinstance(config, Mapping):
        app.config.update(config)
    elif config is not None:
        app.config.from_object(config)
    apply_engine_defaults(app.config)

    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    csrf.init_app(app)
    talisman.init_app(
        app,
        force_https=app.config['TALISMAN_FORCE_HTTPS'],
        session_cookie_secure=app.config['SESSION_COOKIE_SECURE'],
        content_security_policy=CONTENT_SECURITY_POLICY,
    )

    repos = Repositories.from_db(db)
    fetch = Fetcher(app, app.config['CATALOG_FETCH_WORKERS'])
    app.extensions['locallibrary'] = {'repos': repos, 'fetch': fetch}

    app.register_blueprint(create_blueprint(repos, fetch))
    register_error_handlers(app)
    app.cli.add_command(init_db_command)

    @app.route('/')
    def home():
        return redirect(url_for('catalog.index'))

    return app
