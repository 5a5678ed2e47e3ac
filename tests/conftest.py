from datetime import datetime, timezone

import pytest

from hackhub import create_app
from hackhub.config import Config
from hackhub.extensions import db
from hackhub.models import Profile, ProfileRole

PASSWORD = 'secret123'


class TestConfig(Config):
    TESTING = True
    ENV = 'testing'
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    AUTO_CREATE_TABLES = False
    SUBMISSION_DEADLINE = datetime(2999, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""
    app = create_app(TestConfig)
    app.static_folder = str(tmp_path / 'static')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    """Push an application context for service-level tests."""
    with app.test_request_context():
        yield app


@pytest.fixture
def make_profile(app):
    """Factory creating a profile and returning its id."""
    def _make(email, role=ProfileRole.PARTICIPANT, team_id=None, password=PASSWORD, locked=False):
        with app.app_context():
            profile = Profile(
                email=email,
                role=role,
                team_id=team_id,
                problem_submission_locked=locked,
            )
            profile.set_password(password)
            db.session.add(profile)
            db.session.commit()
            return profile.id
    return _make


@pytest.fixture
def login(client):
    def _login(email, password=PASSWORD):
        return client.post('/auth/login', data={'email': email, 'password': password})
    return _login
