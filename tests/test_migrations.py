import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from practice.db import Base

VERSIONS = Path(__file__).resolve().parent.parent / "migrations" / "versions"


def _load_revision(name: str):
    found = importlib.util.spec_from_file_location(name, VERSIONS / f"{name}.py")
    module = importlib.util.module_from_spec(found)
    found.loader.exec_module(module)
    return module


def _upgrade(conn, revision):
    ctx = MigrationContext.configure(conn)
    with Operations.context(ctx):
        revision.upgrade()


async def _schema(url: str, build) -> tuple[set[str], str]:
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(build)
        tables = set((await conn.execute(text(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        ))).scalars().all())
        index_sql = (await conn.execute(text(
            "SELECT sql FROM sqlite_master WHERE name = 'uq_users_username_lower'"
        ))).scalar_one()
    await engine.dispose()
    return tables, index_sql


@pytest.mark.asyncio
async def test_initial_revision_matches_model_metadata(tmp_path):
    revision = _load_revision("20261019_0001_create_users_reviews_and_teams")

    migrated_tables, migrated_index = await _schema(
        f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}", lambda conn: _upgrade(conn, revision)
    )
    model_tables, model_index = await _schema(
        f"sqlite+aiosqlite:///{tmp_path / 'models.db'}", Base.metadata.create_all
    )

    assert migrated_tables == model_tables
    # released usernames ('') must stay outside the unique index on both paths
    assert "WHERE" in migrated_index.upper() and "WHERE" in model_index.upper()
    assert "lower(username)" in migrated_index and "lower(username)" in model_index
