from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///dev.db')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)

    from .routes.auth import auth_bp
    from .routes.workers import workers_bp
    from .routes.income import income_bp
    from .routes.expenses import expenses_bp
    from .routes.audit import audit_bp
    from .routes.dashboard import dashboard_bp
    from .services.audit import AuditValidationError
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(workers_bp, url_prefix='/workers')
    app.register_blueprint(income_bp, url_prefix='/income')
    app.register_blueprint(expenses_bp, url_prefix='/expenses')
    app.register_blueprint(audit_bp, url_prefix='/audit')
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    @app.teardown_appcontext
    def shutdown_session(exc=None):
        SessionLocal.remove()

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        if isinstance(e, AuditValidationError):
            # raised after the business commit; the change itself is saved
            app.logger.error('Audit entry rejected: %s', e)
            return {
                'error': {
                    'status': 422,
                    'title': 'Unprocessable Entity',
                    'detail': f'Change saved but audit entry rejected: {e}'
                }
            }, 422
        if isinstance(e, OperationalError):
            app.logger.error('Database unavailable: %s', e)
            return {
                'error': {
                    'status': 503,
                    'title': 'Service Unavailable',
                    'detail': 'Database unavailable'
                }
            }, 503
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()


def open_session():
    """Return a fresh session that is not bound to the request-scoped one.

    Callers own it and must close it.
    """
    return SessionLocal.session_factory()
