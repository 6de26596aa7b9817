"""
Flask application entry point for the poker league standings engine.
"""
import os
from flask import Flask, jsonify
from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from database import init_db
import config
from services.errors import LeagueError
from services.logging_setup import configure_error_monitoring, configure_logging


def create_app(config_overrides: dict | None = None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config.get_config())
    if config_overrides:
        app.config.update(config_overrides)
    config.validate_runtime(app.config)
    configure_logging(bool(app.config.get('STRUCTURED_LOGGING', True)))
    configure_error_monitoring(app.config.get('SENTRY_DSN', ''))

    @sa_event.listens_for(Engine, 'connect')
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    # Initialize database
    init_db(app)

    # Register blueprints
    from routes.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    @app.errorhandler(LeagueError)
    def handle_league_error(error: LeagueError):
        return jsonify(error.to_dict()), error.status_code

    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app = create_app()
    app.run(host='0.0.0.0', port=port, debug=False)
