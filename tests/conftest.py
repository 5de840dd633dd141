import os
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone
from typing import List
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from jose import jwt

SECRET_KEY = os.getenv("SECRET_KEY", "ci-test-secret-with-enough-length-0123456789")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS512")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Garante que o app e os testes usem o mesmo segredo/algoritmo
os.environ.setdefault("SECRET_KEY", SECRET_KEY)
os.environ.setdefault("JWT_ALGORITHM", ALGORITHM)
os.environ.setdefault("LINKPAGE_DATABASE_URL", f"sqlite:///{ROOT_DIR / 'test_linkpage.db'}")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("API_BASE_URL", "http://api.test")
os.environ.setdefault("FRONTEND_BASE_URL", "http://front.test")
os.environ["MAIL_BACKEND"] = "console"

from app.main import app  # noqa: E402
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.dependencies import get_mailer  # noqa: E402
from app.models.business import Business  # noqa: E402
from app.services.mailer import Mailer, MailDeliveryError, OutgoingEmail  # noqa: E402


def make_auth_headers(business_id: str, is_admin: bool = False, expires_in: timedelta = timedelta(hours=1)) -> dict:
    """
    Gera um JWT compatível com o SessionContext do serviço,
    para ser usado nos headers dos testes.
    """
    exp = datetime.now(timezone.utc) + expires_in
    payload = {
        "sub": str(business_id),
        "is_admin": is_admin,
        "exp": int(exp.timestamp()),
    }
    token = jwt.encode(payload, os.environ["SECRET_KEY"], algorithm=os.environ["JWT_ALGORITHM"])
    return {"Authorization": f"Bearer {token}"}


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def signup_payload(**overrides) -> dict:
    payload = {
        "name": "Joe's Coffee",
        "slug": "joescoffee",
        "tagline": "Best Coffee",
        "email": "joe@example.com",
        "password": "secret1",
    }
    payload.update(overrides)
    return payload


def token_from_link(message: OutgoingEmail) -> str:
    return message.text.rsplit("token=", 1)[1].strip()


class RecordingMailer(Mailer):
    """Guarda as mensagens em memória; ``fail=True`` simula o provedor fora do ar."""

    def __init__(self) -> None:
        self.outbox: List[OutgoingEmail] = []
        self.fail = False

    def send(self, message: OutgoingEmail) -> None:
        if self.fail:
            raise MailDeliveryError("provider down")
        self.outbox.append(message)


@pytest.fixture(autouse=True)
def prepare_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mailer():
    recording = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: recording
    yield recording
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def client(mailer):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def set_flags(db_session):
    """Altera flags da conta direto no banco (verificação/aprovação/admin)."""

    def _set(business_id, **flags):
        business = db_session.get(Business, _as_uuid(business_id))
        for field, value in flags.items():
            setattr(business, field, value)
        db_session.commit()
        return business

    return _set


@pytest.fixture
def signup(client):
    def _signup(**overrides):
        response = client.post("/auth/signup", json=signup_payload(**overrides))
        assert response.status_code == 200, response.text
        return response.json()

    return _signup


@pytest.fixture
def active_business(signup, set_flags):
    """Conta verificada e aprovada; devolve o corpo do signup."""

    def _create(**overrides):
        data = signup(**overrides)
        set_flags(data["business"]["id"], is_verified=True, is_approved=True)
        return data

    return _create


@pytest.fixture
def admin_headers(signup, set_flags):
    data = signup(name="Admin", slug="admin", email="admin@example.com", password="adminpass")
    set_flags(data["business"]["id"], is_verified=True, is_approved=True, is_admin=True)
    return make_auth_headers(data["business"]["id"], is_admin=True)


def _as_uuid(value):
    return value if isinstance(value, UUID) else UUID(str(value))
