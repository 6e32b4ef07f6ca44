"""
Pytest configuration and fixtures.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from contact_intake.config import Settings
from contact_intake.contacts.gateway import StorageGateway
from contact_intake.main import create_app
from contact_intake.shared.database import DatabaseManager


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """File-backed SQLite so every pooled connection sees the same data."""
    return f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}"


@pytest.fixture
def csv_path(tmp_path: Path) -> Path:
    return tmp_path / "data.csv"


@pytest.fixture
def test_settings(database_url: str, csv_path: Path, tmp_path: Path) -> Settings:
    """Create test settings."""
    return Settings(
        app_env="dev",
        debug=True,
        database_url=database_url,
        db_create_database=False,
        csv_import_path=csv_path,
        static_dir=tmp_path / "no-static",
    )


@pytest_asyncio.fixture
async def database(database_url: str) -> AsyncGenerator[DatabaseManager, None]:
    manager = DatabaseManager(database_url)
    yield manager
    await manager.close()


@pytest.fixture
def gateway(database: DatabaseManager) -> StorageGateway:
    return StorageGateway(database)


@pytest.fixture
def valid_record() -> dict[str, str]:
    return {
        "first_name": "John",
        "second_name": "Doe1",
        "email": "j@d.com",
        "phone_number": "0851234567",
        "eircode": "1AB2CD",
    }


@pytest.fixture
def test_app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest_asyncio.fixture
async def async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with the application lifespan running."""
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
