"""
Test configuration and fixtures for adgen-api tests.
"""
import os

# Settings are read at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["STORAGE_TYPE"] = "filesystem"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adgen.main import app
from adgen.config import settings
from adgen.db.database import get_db
from adgen.db.models import Base
from adgen.db.repositories import CreditLedger, ProjectRepository, UserRepository
from adgen.dependencies import get_image_generator, get_video_generator
from adgen.domain.entities import ImageInput, ImageProjectRequest
from adgen.domain.events import event_publisher
from adgen.infrastructure.video_generator import UnavailableVideoGenerator
from adgen.storage.factory import get_asset_store
from adgen.application.generation_service import GenerationService
from tests.fakes import FakeAssetStore, FakeImageGenerator


@pytest.fixture(autouse=True)
def clean_event_subscribers():
    """Keep event subscriptions from leaking between tests."""
    event_publisher.clear_subscribers()
    yield
    event_publisher.clear_subscribers()


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def balance(session_factory):
    """Read a user's balance through a fresh session."""
    def _balance(user_id):
        with session_factory() as session:
            return CreditLedger(session).get_balance(user_id)
    return _balance


@pytest.fixture
def make_user(db):
    def _make_user(user_id="user-1", credits=0):
        return UserRepository(db).create_user(user_id=user_id, email=f"{user_id}@example.com", credits=credits)
    return _make_user


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def image_generator():
    return FakeImageGenerator()


@pytest.fixture
def service_factory(db, asset_store, image_generator):
    """Build a GenerationService over the test database and fakes."""
    def _factory(assets=None, images=None, videos=None, projects=None, **kwargs):
        return GenerationService(
            projects=projects or ProjectRepository(db),
            ledger=CreditLedger(db),
            assets=assets or asset_store,
            image_generator=images or image_generator,
            video_generator=videos or UnavailableVideoGenerator(),
            **kwargs,
        )
    return _factory


@pytest.fixture
def image_request():
    def _request(count=2, product_name="Ceramic Mug", **kwargs):
        images = [
            ImageInput(filename=f"photo{i}.jpg", content_type="image/jpeg", data=f"photo-{i}".encode())
            for i in range(count)
        ]
        return ImageProjectRequest(product_name=product_name, images=images, **kwargs)
    return _request


@pytest.fixture
def sample_project(db, make_user):
    """A finished image project owned by user-1, who has no credits left."""
    make_user("user-1", credits=0)
    repo = ProjectRepository(db)
    project = repo.create_project(
        user_id="user-1",
        product_name="Ceramic Mug",
        product_description="Hand glazed",
        uploaded_images=["https://assets.test/a.jpg", "https://assets.test/b.jpg"],
        is_generating=False,
    )
    return repo.complete_image(project.id, "https://assets.test/generated.png")


@pytest.fixture
def make_token():
    def _make_token(user_id="user-1"):
        return jwt.encode({"sub": user_id}, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)
    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _headers(user_id="user-1"):
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


@pytest.fixture
def client(session_factory, asset_store, image_generator):
    """Create test client wired to the test database and fake providers."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    app.dependency_overrides[get_image_generator] = lambda: image_generator
    app.dependency_overrides[get_video_generator] = lambda: UnavailableVideoGenerator()
    yield TestClient(app)
    app.dependency_overrides.clear()
