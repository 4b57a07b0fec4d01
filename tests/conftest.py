"""Fixtures compartilhadas: banco SQLite temporário, cliente HTTP e tokens"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="junior_squad_tests_")

# Configuração precisa existir antes de importar a aplicação
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/import.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ["DEBUG"] = "false"
os.environ["LOG_FILE"] = f"{_TMP_DIR}/app.log"
os.environ["JWT_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import app.models  # noqa: E402,F401
from app.core.database import Base, get_db  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.services.notifications import get_notifier  # noqa: E402

API = "/api/v1"


class RecordingNotifier:
    """Guarda os eventos emitidos para inspeção nos testes"""

    def __init__(self):
        self.events = []

    def emit(self, event: str, payload: dict) -> None:
        self.events.append((event, payload))

    def names(self):
        return [event for event, _ in self.events]


@pytest.fixture
def database_path(tmp_path):
    path = tmp_path / "test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(database_path, notifier):
    engine = create_async_engine(f"sqlite+aiosqlite:///{database_path}", poolclass=NullPool)
    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


def auth_headers(role: str) -> dict:
    token = create_access_token(f"{role}-user", role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def coach():
    return auth_headers("coach")


@pytest.fixture
def assistant():
    return auth_headers("assistant_coach")


SQUAD = [
    # (camisa, posição, posições preferidas)
    (1, "Goalkeeper", None),
    (12, "Goalkeeper", None),
    (2, "Defender", None),
    (3, "Defender", None),
    (4, "Defender", None),
    (5, "Defender", None),
    (13, "Defender", ["Defender", "Midfielder"]),
    (6, "Midfielder", None),
    (7, "Midfielder", None),
    (8, "Midfielder", None),
    (10, "Midfielder", ["Midfielder", "Forward"]),
    (9, "Forward", None),
    (11, "Forward", None),
    (14, "Forward", None),
]


def create_player(client, headers, jersey_number, position="Midfielder", **extra):
    body = {"name": f"Jogador {jersey_number}", "jersey_number": jersey_number, "position": position}
    body.update({k: v for k, v in extra.items() if v is not None})
    response = client.post(f"{API}/players/", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def squad(client, coach):
    """Elenco de 14 jogadores disponíveis (2 goleiros)"""
    return [
        create_player(client, coach, number, position, preferred_positions=preferred)
        for number, position, preferred in SQUAD
    ]
