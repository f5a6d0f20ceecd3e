import os
import uuid
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import build_conninfo, close_pool, get_connection, init_pool

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docsdb_test")
    return Settings(
        blob_store_backend="local",
        virustotal_api_key="",
        metadata_providers="example",
        ocr_enabled=False,
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3) as conn:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            conn.commit()
    except psycopg.Error as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[str], None, None]:
    """Document ids to delete after the test; their jobs go with them (ON DELETE CASCADE)."""
    cleanup: list[str] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for document_id in cleanup:
                cur.execute("DELETE FROM documents WHERE id = %s", (document_id,))
        conn.commit()


@pytest.fixture
def make_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[str],
) -> Callable[..., str]:
    def _make(
        file_type: str = "pdf",
        filename: str = "report.pdf",
        status: str = "uploaded",
    ) -> str:
        document_id = str(uuid.uuid4())
        user_id = str(uuid.uuid4())
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO documents (id, user_id, original_filename, s3_path, file_type,
                                       size_bytes, status)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    document_id,
                    user_id,
                    filename,
                    f"uploads/{user_id}/{filename}",
                    file_type,
                    1024,
                    status,
                ),
            )
        db_conn.commit()
        integration_cleanup.append(document_id)
        return document_id

    return _make


@pytest.fixture
def make_job(db_conn: psycopg.Connection[Any]) -> Callable[..., int]:
    def _make(
        document_id: str,
        blob_key: str = "uploads/user/report.pdf",
        status: str = "pending",
        attempts: int = 0,
    ) -> int:
        with db_conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO ingestion_jobs (document_id, blob_key, status, attempts)
                VALUES (%s, %s, %s, %s)
                RETURNING id
                """,
                (document_id, blob_key, status, attempts),
            )
            row = cur.fetchone()
            assert row is not None
        db_conn.commit()
        return int(row[0])

    return _make
