# server/tests/conftest.py
import pytest
from datetime import datetime
from unittest.mock import MagicMock, patch
from bson import ObjectId
from fastapi.testclient import TestClient

from fitmentor.main import app
from fitmentor.auth.jwt_auth import get_current_user

USER_ID = ObjectId("64b7f0c2a1b2c3d4e5f60718")
ADMIN_ID = ObjectId("64b7f0c2a1b2c3d4e5f60719")


def make_user(**overrides):
    user = {
        "_id": USER_ID,
        "full_name": "Test User",
        "email": "test@example.com",
        "password": "unused",
        "age": 30,
        "gender": "Male",
        "weight": 70.0,
        "height": 175.0,
        "goal": "Stay Fit",
        "category": "stay_fit",
        "bmi": 22.9,
        "role": "user",
        "created_at": datetime(2024, 1, 1, 12, 0, 0),
    }
    user.update(overrides)
    return user


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def mock_db():
    """Replace the MongoDB handle seen by every router"""
    db = MagicMock()
    with patch("fitmentor.database.connection.db", db):
        yield db


@pytest.fixture
def current_user():
    return make_user()


@pytest.fixture
def as_user(current_user):
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield current_user
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def as_admin():
    admin = make_user(_id=ADMIN_ID, email="admin@example.com", role="admin")
    app.dependency_overrides[get_current_user] = lambda: admin
    yield admin
    app.dependency_overrides.pop(get_current_user, None)
