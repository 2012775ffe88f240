"""
Pytest fixtures: in-memory database, temporary upload root, seeded
admin/client users and an API client wired to the same session.
"""
import io
import json
import logging
import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ.setdefault("UPLOADS_PATH", os.path.join(tempfile.gettempdir(), "servicedownloadable_uploads"))

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from servicedownloadable.config import settings
from servicedownloadable.database import get_session
from servicedownloadable.main import app
from servicedownloadable.models import ClientOrder, Product, ServiceDownloadable, User
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.services.file_storage import file_path
from servicedownloadable.services.order_lifecycle import OrderLifecycle
from servicedownloadable.utils.hash import hash_password
from servicedownloadable.utils.token import create_access_token


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Only errors on the console; caplog still sees INFO where a test asks for it."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(logging.ERROR)
    handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)-8s | %(name)s - %(message)s'))
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.ERROR)

    yield


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def uploads_path(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "uploads_path", str(path))
    return str(path)


@pytest.fixture
def write_blob(uploads_path):
    """Put a file in the upload root the same way an upload would."""
    def _write(filename: str, content: bytes = b"file content") -> str:
        path = file_path(uploads_path, filename)
        with open(path, "wb") as f:
            f.write(content)
        return path
    return _write


@pytest.fixture
def make_upload():
    def _make(filename: str, content: bytes = b"uploaded content") -> UploadFile:
        return UploadFile(file=io.BytesIO(content), filename=filename)
    return _make


@pytest.fixture
def service(session, uploads_path) -> DownloadableService:
    return DownloadableService(session, uploads_path=uploads_path)


@pytest.fixture
def lifecycle(session, uploads_path) -> OrderLifecycle:
    return OrderLifecycle(session, uploads_path=uploads_path)


# ============================================================================
# USERS
# ============================================================================

def _create_user(session: Session, email: str, role: str) -> User:
    user = User(
        first_name="Test",
        last_name=role.title(),
        email=email,
        password=hash_password("secret-pass-123"),
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin_user(session) -> User:
    return _create_user(session, "admin@example.com", "admin")


@pytest.fixture
def client_user(session) -> User:
    return _create_user(session, "downloadtest@example.com", "client")


@pytest.fixture
def other_client(session) -> User:
    return _create_user(session, "otherclient@example.com", "client")


# ============================================================================
# CATALOG & ORDERS
# ============================================================================

@pytest.fixture
def product(session) -> Product:
    """Downloadable product without a file yet."""
    product = Product(title="Test Downloadable Product", slug="test-downloadable-product", type="downloadable")
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def configured_product(session) -> Product:
    product = Product(
        title="Invoice Template",
        slug="invoice-template",
        type="downloadable",
        config=json.dumps({"filename": "invoice.pdf"}),
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def active_order(lifecycle, client_user, configured_product) -> ClientOrder:
    order = lifecycle.create_order(client_user.id, configured_product.id)
    return lifecycle.activate_order(order)


@pytest.fixture
def order_service(lifecycle, active_order) -> ServiceDownloadable:
    return lifecycle.get_order_service(active_order)


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def api(session, uploads_path):
    def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _auth(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return _auth(admin_user)


@pytest.fixture
def client_headers(client_user) -> dict:
    return _auth(client_user)


@pytest.fixture
def other_client_headers(other_client) -> dict:
    return _auth(other_client)
