import logging
import re
from contextlib import contextmanager
from typing import Any, Mapping, Sequence, Union

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import get_settings

settings = get_settings()

logger = logging.getLogger(__name__)

# Create engine with connection pool
engine = create_engine(
    settings.postgres_url,
    pool_pre_ping=True,
    echo=settings.debug  # Log SQL queries in debug mode
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Params = Union[Mapping[str, Any], Sequence[Any], None]

_POSITIONAL = re.compile(r"\$(\d+)")


@contextmanager
def get_db_session():
    """
    Context manager for database sessions.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if PostgreSQL is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception as e:
        logger.error("PostgreSQL connection failed: %s", e)
        return False


def bind_positional(sql: str, values: Sequence[Any]) -> tuple[str, dict]:
    """
    Rewrite `$N` placeholders into SQLAlchemy named binds.

    `$1` becomes `:p1` and is bound to values[0], and so on.
    """
    params = {f"p{i}": value for i, value in enumerate(values, start=1)}
    return _POSITIONAL.sub(r":p\1", sql), params


def execute_raw_sql(db: Session, sql: str, params: Params = None) -> list[dict]:
    """
    Execute raw SQL and return results as list of dicts.

    `params` is either a dict of named binds (`:name`) or a sequence
    bound positionally to `$1..$N`. Statements without a result set
    return an empty list.
    """
    if params is None or isinstance(params, Mapping):
        statement, binds = sql, dict(params or {})
    else:
        statement, binds = bind_positional(sql, params)

    result = db.execute(text(statement), binds)
    if not result.returns_rows:
        return []
    # Convert rows to dicts
    columns = list(result.keys())
    return [dict(zip(columns, row)) for row in result.fetchall()]
