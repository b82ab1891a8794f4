"""Pytest configuration and fixtures."""

import itertools

import pytest

from skillswap import create_app, db
from skillswap.config import TestingConfig
from skillswap.identity import IdentityService


@pytest.fixture
def app():
    """A fresh application backed by its own in-memory database."""
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    """Application context for tests that call services directly."""
    with app.app_context():
        yield
        db.session.remove()


@pytest.fixture
def make_user(app, ctx):
    """Register users through the identity service, returning their rows."""
    service = IdentityService(db.session, app.config)
    counter = itertools.count(1)

    def _make(name=None):
        n = next(counter)
        result = service.register({
            'name': name or f'User {n}',
            'email': f'user{n}@example.com',
            'password': 'secret123',
        })
        return result['user']
    return _make


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def register(client):
    """Register a user over HTTP, returning (user, headers)."""
    counter = itertools.count(1)

    def _register(name=None, email=None, password='secret123'):
        n = next(counter)
        response = client.post('/auth/register', json={
            'name': name or f'Member {n}',
            'email': email or f'member{n}@example.com',
            'password': password,
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return body['user'], auth_headers(body['accessToken'])
    return _register


@pytest.fixture
def create_skill(client):
    def _create_skill(headers, title='Guitar', skill_type='offered', category='Music', **extra):
        response = client.post('/skills', headers=headers, json={
            'title': title,
            'category': category,
            'skill_type': skill_type,
            **extra,
        })
        assert response.status_code == 201, response.get_json()
        return response.get_json()['skill']
    return _create_skill
