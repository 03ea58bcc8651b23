"""Root conftest: load test environment variables, configure structlog, and shared fixtures."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog
from cryptography.hazmat.primitives.asymmetric import rsa
from dotenv import load_dotenv

from shared.auth.password import SimpleHasher
from shared.db import (
    Database,
    SqliteAccountRepository,
    SqliteProfileRepository,
    SqliteSessionRepository,
    SqliteTextureRepository,
)
from shared.logging import shared_processors

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Configure structlog to route through stdlib logging so caplog works in tests.
structlog.configure(
    processors=shared_processors(),
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    # Generating a 4096-bit key per test is too slow; 2048 bits signs the same way.
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def db(tmp_path: Path) -> Iterator[Database]:
    database = Database(tmp_path / "test.db")
    database.connect()
    yield database
    database.close()


@pytest.fixture
def accounts(db: Database) -> SqliteAccountRepository:
    return SqliteAccountRepository(db)


@pytest.fixture
def profiles(db: Database) -> SqliteProfileRepository:
    return SqliteProfileRepository(db)


@pytest.fixture
def sessions(db: Database) -> SqliteSessionRepository:
    return SqliteSessionRepository(db)


@pytest.fixture
def textures(db: Database) -> SqliteTextureRepository:
    return SqliteTextureRepository(db)


@pytest.fixture
def hasher() -> SimpleHasher:
    return SimpleHasher()


def _make_png(width: int, height: int, padding: int = 0) -> bytes:
    """Minimal PNG: signature plus an IHDR chunk, optionally padded."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    chunk = struct.pack(">I", len(ihdr)) + b"IHDR" + ihdr + struct.pack(">I", zlib.crc32(b"IHDR" + ihdr))
    return b"\x89PNG\r\n\x1a\n" + chunk + b"\x00" * padding


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    return _make_png
