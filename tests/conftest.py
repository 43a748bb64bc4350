# tests/conftest.py
"""
Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database and media folder; Gemini
calls are answered by a fake client so nothing leaves the process.
"""

import io
import json
import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

# Environment must be in place before backend.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="artisan-media-")
os.environ["SEED_ON_STARTUP"] = "off"
os.environ["BACKEND_ORIGIN"] = ""
for _key in ("GEMINI_API_KEY", "GENAI_API_KEY", "GOOGLE_API_KEY"):
    os.environ[_key] = ""

# Make "from backend.app import app" work when tests run from CI/workdir
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from backend import config, genai  # noqa: E402
from backend.app import app  # noqa: E402
from backend.db import Base, get_db  # noqa: E402
from backend.i18n import TranslationManager  # noqa: E402


# ============================================================
# Database
# ============================================================

@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================================
# App client
# ============================================================

@pytest.fixture
def media_dir(tmp_path, monkeypatch):
    path = tmp_path / "media"
    monkeypatch.setattr(config, "MEDIA_DIR", path)
    return path


@pytest.fixture
def client(session_factory, media_dir, monkeypatch):
    """TestClient bound to the per-test database; lifespan (create_all + seed) is skipped."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(app.state, "translation_manager", TranslationManager(session_factory))
    monkeypatch.setattr(config, "GEMINI_API_KEY", "")
    monkeypatch.setattr(genai, "_client", None)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def signup(client, email="maker@example.com", password="secret123"):
    resp = client.post("/auth/signup", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user_id"]


@pytest.fixture
def artisan(client):
    """(headers, user_id) for a freshly signed-up artisan."""
    return signup(client)


@pytest.fixture
def other_artisan(client):
    return signup(client, email="neighbour@example.com")


# ============================================================
# Sample data
# ============================================================

def png_bytes(color=(200, 120, 60)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (24, 24), color).save(buf, format="PNG")
    return buf.getvalue()


PRODUCT_FORM = {
    "name": "Terracotta Vase",
    "description": "Hand-thrown vase fired in a wood kiln.",
    "price": "1500",
    "stock": "4",
    "category": "Pottery",
    "materials": "Clay, Natural Glaze",
    "name_hi": "टेराकोटा फूलदान",
    "materials_hi": "मिट्टी, प्राकृतिक ग्लेज़",
}


def create_product(client, headers, n_images=1, **overrides):
    data = {**PRODUCT_FORM, **overrides}
    files = [("files", (f"vase-{i}.png", png_bytes(), "image/png")) for i in range(n_images)]
    return client.post("/products", data=data, files=files or None, headers=headers)


# ============================================================
# Fake Gemini client
# ============================================================

def reply(payload) -> SimpleNamespace:
    """A generate_content response carrying `payload` as its JSON text."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(text=text, candidates=[])


def image_reply(data: bytes, mime_type="image/png") -> SimpleNamespace:
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime_type), text=None)
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(text=None, candidates=[candidate])


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        out = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(out, Exception):
            raise out
        return out


@pytest.fixture
def fake_genai(monkeypatch):
    """install(*replies) -> FakeModels; replies are served in order, the last one repeats."""

    def install(*replies):
        models = FakeModels(replies)
        fake = SimpleNamespace(models=models)
        monkeypatch.setattr(genai, "get_client", lambda: fake)
        return models

    return install


@pytest.fixture
def no_genai(monkeypatch):
    monkeypatch.setattr(genai, "get_client", lambda: None)
