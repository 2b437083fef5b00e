import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Добавляем корень проекта в PYTHONPATH
sys.path.insert(0, str(Path(__file__).parent.parent))

TEST_DB_URL = "sqlite:///./test.db"
os.environ.setdefault("COURSE_DATABASE_URL", TEST_DB_URL)

from main import app  # noqa: E402
import auth  # noqa: E402
import database  # noqa: E402
from database import Base  # noqa: E402

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Фикстура для БД (выполняется для каждой функции)
@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


# Фикстура для клиента (пересоздается для каждого теста)
@pytest.fixture(scope="function")
def client(db):
    def override_get_db():
        try:
            yield db
        finally:
            db.rollback()

    app.dependency_overrides[database.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_student():
    return {
        "student_id": "202301",
        "name": "Alice Smith",
        "email": "alice@university.edu",
        "password": "initialpass",
    }


@pytest.fixture
def test_week():
    return {
        "title": "Week 1: Introduction",
        "start_date": "2024-03-05",
        "description": "Course overview and setup",
        "links": ["https://example.org/syllabus", "https://example.org/setup"],
    }


@pytest.fixture
def test_user(db):
    auth.create_user(db, "Admin User", "admin@university.edu", "adminpass123")
    return {"email": "admin@university.edu", "password": "adminpass123"}


@pytest.fixture
def created_week(client, test_week):
    response = client.post("/weekly?resource=weeks", json=test_week)
    assert response.status_code == 201
    return response.json()["data"]
