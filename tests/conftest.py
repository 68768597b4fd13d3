import os
from datetime import datetime

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import requests

from app import create_app
from extensions import db
from models.catalog_import import CatalogImport
from models.character import Character
from services import accounts


CATALOG_URL = "https://catalog.test/api/characters"
PAGE_2_URL = f"{CATALOG_URL}?page=2&limit=10"
CSRF_TOKEN = "test-csrf-token"

# Пять персонажей с известными именами и расами
CHARACTERS = [
    {"id": 1, "name": "Goku", "ki": "60.000.000", "maxKi": "90 Septillion", "race": "Saiyan",
     "gender": "Male", "description": "El protagonista.", "image": "https://img.test/goku.webp",
     "affiliation": "Z Fighter", "deletedAt": None},
    {"id": 2, "name": "Vegeta", "ki": "54.000.000", "maxKi": "19.84 Septillion", "race": "Saiyan",
     "gender": "Male", "description": "Príncipe de los Saiyans.", "image": "https://img.test/vegeta.webp",
     "affiliation": "Z Fighter", "deletedAt": None},
    {"id": 3, "name": "Piccolo", "ki": "2.000.000", "maxKi": "500.000.000", "race": "Namekian",
     "gender": "Male", "description": "Hijo de Piccolo Daimaō.", "image": "https://img.test/piccolo.webp",
     "affiliation": "Z Fighter", "deletedAt": None},
    {"id": 4, "name": "Bulma", "ki": "0", "maxKi": "0", "race": "Human",
     "gender": "Female", "description": "Científica.", "image": "https://img.test/bulma.webp",
     "affiliation": "Z Fighter", "deletedAt": None},
    {"id": 5, "name": "Freezer", "ki": "530.000", "maxKi": "52.71 Septillion", "race": "Frieza Race",
     "gender": "Male", "description": "Emperador del universo.", "image": "https://img.test/freezer.webp",
     "affiliation": "Army of Frieza", "deletedAt": None},
]


class FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeCatalogSession:
    """Подменяет requests.Session: отдаёт заранее заданные страницы по адресу."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        if isinstance(page, FakeResponse):
            return page
        return FakeResponse(page)

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


def two_page_catalog() -> dict:
    return {
        CATALOG_URL: {"items": CHARACTERS[:3], "links": {"next": PAGE_2_URL}},
        PAGE_2_URL: {"items": CHARACTERS[3:], "links": {"next": ""}},
    }


@pytest.fixture
def app():
    application = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "CATALOG_API_URL": CATALOG_URL,
            "CATALOG_PAGE_SIZE": 10,
        }
    )
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_catalog(monkeypatch):
    """Фабрика поддельного внешнего API; возвращает сессию с журналом запросов."""

    def _install(pages: dict | None = None) -> FakeCatalogSession:
        session = FakeCatalogSession(two_page_catalog() if pages is None else pages)
        monkeypatch.setattr("services.catalog.requests.Session", lambda: session)
        return session

    return _install


@pytest.fixture
def seed_catalog(app):
    """Заполняет каталог напрямую, без обращения к внешнему API."""
    with app.app_context():
        for item in CHARACTERS:
            db.session.add(
                Character(
                    id=item["id"],
                    name=item["name"],
                    ki=item["ki"],
                    max_ki=item["maxKi"],
                    race=item["race"],
                    gender=item["gender"],
                    description=item["description"],
                    image=item["image"],
                    affiliation=item["affiliation"],
                )
            )
        db.session.add(CatalogImport(imported_count=len(CHARACTERS), completed_at=datetime.utcnow()))
        db.session.commit()
    return [item["id"] for item in CHARACTERS]


@pytest.fixture
def make_user(app):
    def _make_user(username: str = "goku", password: str = "Kamehameha#1"):
        with app.app_context():
            accounts.register(username, password, password)
        return username, password

    return _make_user


def set_csrf(client, token: str = CSRF_TOKEN) -> str:
    with client.session_transaction() as sess:
        sess["csrf_token"] = token
    return token


def login(client, username: str, password: str):
    token = set_csrf(client)
    return client.post(
        "/login",
        data={"username": username, "password": password, "csrf_token": token},
    )
