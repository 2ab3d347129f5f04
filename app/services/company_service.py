"""
Company Service - CRUD operations for the `companies` table.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from app.core.errors import AppError
from app.db.postgres import get_db_session, execute_raw_sql
from app.schemas.schemas import (
    Company, CompanyCreate, CompanyDetail, CompanyUpdate, JobSummary
)
from app.services.common import classify_store_errors, update_fields, validate_payload
from app.utils.sql import FilterColumns, FilterCriteria, build_filter_clause, build_set_clause

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = "handle, name, description, num_employees, logo_url"

# Public field name -> column, where they differ
COLUMN_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

FILTER_COLUMNS = FilterColumns(range_column="num_employees", text_column="name")


class CompanyService:
    """
    Handles company storage.
    Companies are keyed by their `handle`.
    """

    def create(self, data: Union[CompanyCreate, Mapping[str, Any]]) -> Company:
        """
        Create a company.

        Raises:
            AppError(BAD_REQUEST) if the handle or name is already taken.
        """
        company = validate_payload(CompanyCreate, data)

        with classify_store_errors(f"Invalid company data: {company.handle}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    INSERT INTO companies (handle, name, description, num_employees, logo_url)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {COMPANY_COLUMNS}
                    """,
                    [company.handle, company.name, company.description,
                     company.num_employees, company.logo_url]
                )

        logger.info("Created company %s", company.handle)
        return Company.model_validate(rows[0])

    def find_all(
        self,
        min_employees: Optional[int] = None,
        max_employees: Optional[int] = None,
        name: Optional[str] = None,
    ) -> List[Company]:
        """List companies ordered by name, optionally filtered by size and name."""
        where_clause, values = build_filter_clause(
            FilterCriteria(min_bound=min_employees, max_bound=max_employees, name_like=name),
            FILTER_COLUMNS,
        )

        sql = f"SELECT {COMPANY_COLUMNS} FROM companies"
        if where_clause:
            sql += f" WHERE {where_clause}"
        sql += " ORDER BY name"

        with get_db_session() as db:
            rows = execute_raw_sql(db, sql, values)
        return [Company.model_validate(r) for r in rows]

    def get(self, handle: str) -> CompanyDetail:
        """Get a company together with its jobs."""
        with get_db_session() as db:
            rows = execute_raw_sql(
                db,
                f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1",
                [handle]
            )
            if not rows:
                raise AppError.not_found(f"No company: {handle}")

            jobs = execute_raw_sql(
                db,
                """
                SELECT id, title, salary, equity FROM jobs
                WHERE company_handle = $1 ORDER BY id
                """,
                [handle]
            )

        return CompanyDetail(
            **rows[0], jobs=[JobSummary.model_validate(j) for j in jobs]
        )

    def update(self, handle: str, data: Union[CompanyUpdate, Mapping[str, Any]]) -> Company:
        """
        Update only the fields present in `data`.

        Raises:
            AppError(BAD_REQUEST) for empty data or unknown fields.
            AppError(NOT_FOUND) if no such company.
        """
        set_clause, values = build_set_clause(update_fields(CompanyUpdate, data), COLUMN_MAP)
        handle_idx = len(values) + 1

        with classify_store_errors(f"Invalid company data: {handle}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    UPDATE companies SET {set_clause}
                    WHERE handle = ${handle_idx}
                    RETURNING {COMPANY_COLUMNS}
                    """,
                    [*values, handle]
                )

        if not rows:
            raise AppError.not_found(f"No company: {handle}")
        return Company.model_validate(rows[0])

    def remove(self, handle: str) -> None:
        """Delete a company. Its jobs go with it."""
        with get_db_session() as db:
            rows = execute_raw_sql(
                db,
                "DELETE FROM companies WHERE handle = $1 RETURNING handle",
                [handle]
            )

        if not rows:
            raise AppError.not_found(f"No company: {handle}")
        logger.info("Removed company %s", handle)
