"""
Tests for the database manager.
"""

from pathlib import Path

import pytest
from sqlalchemy import text

from voice_resolver.shared.database import DatabaseManager, get_database_manager


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'voices.db'}"


class TestDatabaseManager:
    @pytest.mark.asyncio
    async def test_ping(self, sqlite_url: str) -> None:
        manager = DatabaseManager(sqlite_url)
        try:
            await manager.ping()
        finally:
            await manager.close()

    @pytest.mark.asyncio
    async def test_ping_fails_for_unreachable_database(self, tmp_path: Path) -> None:
        manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'voices.db'}")
        try:
            with pytest.raises(Exception):
                await manager.ping()
        finally:
            await manager.close()

    @pytest.mark.asyncio
    async def test_session_is_read_only(self, sqlite_url: str) -> None:
        manager = DatabaseManager(sqlite_url)
        try:
            async with manager.engine.begin() as conn:
                await conn.execute(text("CREATE TABLE scratch (id INTEGER)"))

            async with manager.session() as session:
                await session.execute(text("INSERT INTO scratch VALUES (1)"))

            async with manager.session() as session:
                result = await session.execute(text("SELECT count(*) FROM scratch"))
                assert result.scalar() == 0
        finally:
            await manager.close()

    @pytest.mark.asyncio
    async def test_close_resets_engine(self, sqlite_url: str) -> None:
        manager = DatabaseManager(sqlite_url)
        first = manager.engine

        await manager.close()

        assert manager.engine is not first
        await manager.close()


class TestGetDatabaseManager:
    def test_returns_singleton(self) -> None:
        assert get_database_manager() is get_database_manager()
