import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def apply_engine_defaults(config):
    """Fill in driver options that depend on the final database URI."""
    options = dict(config.get('SQLALCHEMY_ENGINE_OPTIONS') or {})
    if config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        # SQLite connections are shared with the fetch pool threads
        connect_args = dict(options.get('connect_args') or {})
        connect_args.setdefault('check_same_thread', False)
        options['connect_args'] = connect_args
    config['SQLALCHEMY_ENGINE_OPTIONS'] = options


class Config:
    SECRET_KEY = os.environ.get('LOCALLIBRARY_SECRET') or "dev-secret-change-me"
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f"sqlite:///{os.path.join(BASE_DIR, 'locallibrary.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Number of threads used for the fan-out fetches; 0 runs them inline
    CATALOG_FETCH_WORKERS = _env_int('LOCALLIBRARY_FETCH_WORKERS', 4)

    LOG_LEVEL = os.environ.get('LOCALLIBRARY_LOG_LEVEL', 'INFO')

    # Security headers
    TALISMAN_FORCE_HTTPS = os.environ.get('LOCALLIBRARY_FORCE_HTTPS', '').lower() in ('1', 'true', 'yes')
    SESSION_COOKIE_SECURE = TALISMAN_FORCE_HTTPS


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    CATALOG_FETCH_WORKERS = 0
    LOG_LEVEL = 'WARNING'
    TALISMAN_FORCE_HTTPS = False
    SESSION_COOKIE_SECURE = False
