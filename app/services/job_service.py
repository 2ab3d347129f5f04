"""
Job Service - CRUD operations for the `jobs` table.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from app.core.errors import AppError
from app.db.postgres import get_db_session, execute_raw_sql
from app.schemas.schemas import Company, Job, JobCreate, JobDetail, JobListing, JobUpdate
from app.services.common import classify_store_errors, update_fields, validate_payload
from app.utils.sql import FilterColumns, FilterCriteria, build_filter_clause, build_set_clause

logger = logging.getLogger(__name__)

JOB_COLUMNS = "id, title, salary, equity, company_handle"

# Equity is NUMERIC; "has equity" means equity > 0
FILTER_COLUMNS = FilterColumns(range_column="salary", text_column="title", flag_column="equity")


class JobService:
    """
    Handles job storage.
    Jobs are keyed by their generated integer `id`.
    """

    def create(self, data: Union[JobCreate, Mapping[str, Any]]) -> Job:
        """
        Create a job for an existing company.

        Raises:
            AppError(BAD_REQUEST) if the company does not exist.
        """
        job = validate_payload(JobCreate, data)

        with classify_store_errors(f"Invalid job data for company: {job.company_handle}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    INSERT INTO jobs (title, salary, equity, company_handle)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {JOB_COLUMNS}
                    """,
                    [job.title, job.salary, job.equity, job.company_handle]
                )

        created = Job.model_validate(rows[0])
        logger.info("Created job %s for %s", created.id, created.company_handle)
        return created

    def find_all(
        self,
        min_salary: Optional[int] = None,
        max_salary: Optional[int] = None,
        has_equity: bool = False,
        title: Optional[str] = None,
    ) -> List[JobListing]:
        """List jobs ordered by title, optionally filtered by salary, equity and title."""
        where_clause, values = build_filter_clause(
            FilterCriteria(
                min_bound=min_salary, max_bound=max_salary, name_like=title, flag=has_equity
            ),
            FILTER_COLUMNS,
        )

        sql = """
            SELECT j.id, j.title, j.salary, j.equity, j.company_handle, c.name AS company_name
            FROM jobs j
            LEFT JOIN companies c ON c.handle = j.company_handle
        """
        if where_clause:
            sql += f" WHERE {where_clause}"
        sql += " ORDER BY j.title, j.id"

        with get_db_session() as db:
            rows = execute_raw_sql(db, sql, values)
        return [JobListing.model_validate(r) for r in rows]

    def get(self, job_id: int) -> JobDetail:
        """Get a job with its company embedded."""
        with get_db_session() as db:
            rows = execute_raw_sql(
                db, f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id]
            )
            if not rows:
                raise AppError.not_found(f"No job: {job_id}")
            job = rows[0]

            companies = execute_raw_sql(
                db,
                """
                SELECT handle, name, description, num_employees, logo_url
                FROM companies WHERE handle = $1
                """,
                [job.pop("company_handle")]
            )

        return JobDetail(**job, company=Company.model_validate(companies[0]))

    def update(self, job_id: int, data: Union[JobUpdate, Mapping[str, Any]]) -> Job:
        """
        Update title, salary and/or equity. A job's id and company never change.

        Raises:
            AppError(BAD_REQUEST) for empty data or non-updatable fields.
            AppError(NOT_FOUND) if no such job.
        """
        set_clause, values = build_set_clause(update_fields(JobUpdate, data), {})
        id_idx = len(values) + 1

        with classify_store_errors(f"Invalid update for job: {job_id}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    UPDATE jobs SET {set_clause}
                    WHERE id = ${id_idx}
                    RETURNING {JOB_COLUMNS}
                    """,
                    [*values, job_id]
                )

        if not rows:
            raise AppError.not_found(f"No job: {job_id}")
        return Job.model_validate(rows[0])

    def remove(self, job_id: int) -> None:
        """Delete a job."""
        with get_db_session() as db:
            rows = execute_raw_sql(
                db, "DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id]
            )

        if not rows:
            raise AppError.not_found(f"No job: {job_id}")
        logger.info("Removed job %s", job_id)
