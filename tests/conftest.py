"""
Shared fixtures: a fresh in-memory database per test, seeded with the
default units, plus helpers to create recipes through the API.
"""

import pytest

from app import create_app, init_db
from models import db


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', overrides={'UPLOAD_FOLDER': str(tmp_path / 'uploads')})
    init_db(app)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def make_recipe(client):
    """POST a recipe and return its JSON; ingredients default to one onion."""
    def _make(name, ingredients=None, tags=None, recipe='Alles kochen.', **extra):
        body = {
            'name': name,
            'recipe': recipe,
            'ingredients': ingredients or [{'amount': 1, 'unit': 'Stk', 'name': 'Zwiebel'}],
            'tags': tags or [],
        }
        body.update(extra)
        response = client.post('/api/recipes', json=body)
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make
