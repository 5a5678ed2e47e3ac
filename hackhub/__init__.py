"""Application factory for HackHub."""

from __future__ import annotations

from flask import Flask, jsonify, redirect, render_template, request, url_for

from hackhub.blueprints import applications_bp, auth_bp, problems_bp, profile_bp
from hackhub.config import Config
from hackhub.extensions import csrf, db, limiter, login_manager, migrate
from hackhub.models import Profile
from hackhub.security.config import (
    configure_secure_session,
    configure_security_headers,
    validate_input_length,
)


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(config_class)

    _init_extensions(app)
    _init_login(app)

    configure_security_headers(app)
    configure_secure_session(app)
    validate_input_length(app)

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(profile_bp)
    app.register_blueprint(problems_bp)
    app.register_blueprint(applications_bp)

    _register_error_handlers(app)

    from hackhub.commands import register_commands
    register_commands(app)

    return app


def _init_extensions(app):
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    limiter.init_app(app)

    # Local runs without `flask db upgrade`
    if app.config.get('AUTO_CREATE_TABLES'):
        with app.app_context():
            db.create_all()


def _init_login(app):
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"

    @login_manager.user_loader
    def load_profile(profile_id: str):
        return db.session.get(Profile, profile_id)

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        return redirect(url_for('auth.login', next=request.path))


def _register_error_handlers(app):
    @app.errorhandler(413)
    def payload_too_large(error):
        message = 'Upload is larger than the allowed size'
        app.logger.warning(f"Rejected oversized request to {request.path}")
        if request.endpoint == 'applications.upload_screenshot':
            return jsonify({'error': message}), 413
        return message, 413

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled error on {request.path}: {error}")
        return render_template('500.html'), 500
