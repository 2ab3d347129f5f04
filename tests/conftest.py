"""
Shared fixtures.

Model tests run against a real PostgreSQL database (default `jobly_test`,
override with JOBLY_TEST_DB). The schema is rebuilt once per session and
reseeded before every test; the suites are skipped when the database is
unreachable.
"""
import os

# Must happen before anything imports app.core.config
os.environ["POSTGRES_DB"] = os.environ.get("JOBLY_TEST_DB", "jobly_test")
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")

from pathlib import Path

import pytest
from sqlalchemy import text

from app.core.auth import hash_password
from app.db.postgres import engine, test_postgres_connection

SCHEMA_FILE = Path(__file__).resolve().parent.parent / "scripts" / "schema.sql"


@pytest.fixture(scope="session")
def database():
    """Fresh schema in the test database, or skip."""
    if not test_postgres_connection():
        pytest.skip("PostgreSQL test database not reachable")

    with engine.begin() as conn:
        conn.execute(text(SCHEMA_FILE.read_text(encoding="utf-8")))
    yield engine
    engine.dispose()


@pytest.fixture
def job_ids(database):
    """Reseed all tables; returns the ids of Job1..Job4 in order."""
    with database.begin() as conn:
        conn.execute(text(
            "TRUNCATE applications, jobs, users, companies RESTART IDENTITY CASCADE"
        ))
        conn.execute(
            text("""
                INSERT INTO companies (handle, name, num_employees, description, logo_url)
                VALUES (:handle, :name, :num, :desc, :logo)
            """),
            [
                {"handle": "c1", "name": "C1", "num": 1, "desc": "Desc1", "logo": "http://c1.img"},
                {"handle": "c2", "name": "C2", "num": 2, "desc": "Desc2", "logo": "http://c2.img"},
                {"handle": "c3", "name": "C3", "num": 3, "desc": "Desc3", "logo": "http://c3.img"},
            ]
        )
        result = conn.execute(text("""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ('Job1', 100, 0.1, 'c1'),
                   ('Job2', 200, 0.2, 'c1'),
                   ('Job3', 300, 0, 'c2'),
                   ('Job4', NULL, NULL, 'c3')
            RETURNING id
        """))
        ids = [row[0] for row in result.fetchall()]

        conn.execute(
            text("""
                INSERT INTO users (username, password, first_name, last_name, email)
                VALUES (:username, :password, :first, :last, :email)
            """),
            [
                {"username": "u1", "password": hash_password("password1"),
                 "first": "U1F", "last": "U1L", "email": "u1@email.com"},
                {"username": "u2", "password": hash_password("password2"),
                 "first": "U2F", "last": "U2L", "email": "u2@email.com"},
            ]
        )
        conn.execute(
            text("INSERT INTO applications (username, job_id) VALUES ('u1', :jid)"),
            {"jid": ids[0]}
        )
    return ids


@pytest.fixture
def fetch(database):
    """Run a read-only query against the test database, rows as dicts."""
    def _fetch(sql, params=None):
        with database.connect() as conn:
            result = conn.execute(text(sql), params or {})
            return [dict(row._mapping) for row in result]
    return _fetch
