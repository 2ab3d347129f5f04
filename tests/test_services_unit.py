"""
Service tests that need no database.

The session factory and SQL execution are patched, so these check input
validation, statement assembly and error classification only.

Run:
    pytest tests/test_services_unit.py -v
"""
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.errors import AppError, ErrorKind
from app.services.company_service import CompanyService
from app.services.job_service import JobService
from app.services.user_service import UserService


@pytest.fixture
def no_store():
    """Patched sessions that fail the test if anything opens one."""
    session = MagicMock(side_effect=AssertionError("store must not be touched"))
    with patch("app.services.company_service.get_db_session", session), \
            patch("app.services.job_service.get_db_session", session), \
            patch("app.services.user_service.get_db_session", session):
        yield session


def company_row(**overrides):
    row = {
        "handle": "c1",
        "name": "C1",
        "description": "Desc1",
        "num_employees": 1,
        "logo_url": None,
    }
    row.update(overrides)
    return row


class TestRejectedBeforeStore:
    """Caller errors are raised without opening a session"""

    def test_company_update_empty(self, no_store):
        with pytest.raises(AppError) as exc_info:
            CompanyService().update("c1", {})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        no_store.assert_not_called()

    def test_company_update_handle_not_allowed(self, no_store):
        with pytest.raises(AppError) as exc_info:
            CompanyService().update("c1", {"handle": "c9"})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_company_find_all_min_over_max(self, no_store):
        with pytest.raises(AppError) as exc_info:
            CompanyService().find_all(min_employees=10, max_employees=1)

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_job_update_empty(self, no_store):
        with pytest.raises(AppError) as exc_info:
            JobService().update(1, {})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_job_update_company_not_allowed(self, no_store):
        with pytest.raises(AppError) as exc_info:
            JobService().update(1, {"companyHandle": "c2"})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_job_find_all_min_over_max(self, no_store):
        with pytest.raises(AppError) as exc_info:
            JobService().find_all(min_salary=500, max_salary=100)

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_user_update_empty(self, no_store):
        with pytest.raises(AppError) as exc_info:
            UserService().update("u1", {})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST

    def test_company_create_invalid_payload(self, no_store):
        with pytest.raises(AppError) as exc_info:
            CompanyService().create({"handle": "c9", "numEmployees": -1})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST


class TestStatementAssembly:
    """SQL text and positional values handed to the store"""

    def test_company_update_binds_handle_last(self):
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql",
                      return_value=[company_row(num_employees=None)]) as execute:
            company = CompanyService().update("c1", {"numEmployees": None, "name": "C1"})

        sql, values = execute.call_args.args[1:]
        assert '"name"=$1, "num_employees"=$2' in sql
        assert "WHERE handle = $3" in sql
        assert values == ["C1", None, "c1"]
        assert company.num_employees is None

    def test_company_find_all_where_clause(self):
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql",
                      return_value=[company_row()]) as execute:
            companies = CompanyService().find_all(min_employees=1, name="c")

        sql, values = execute.call_args.args[1:]
        assert 'WHERE "num_employees" >= $1 AND "name" ILIKE $2' in sql
        assert values == [1, "%c%"]
        assert [c.handle for c in companies] == ["c1"]

    def test_company_find_all_unfiltered(self):
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql",
                      return_value=[]) as execute:
            CompanyService().find_all()

        sql, values = execute.call_args.args[1:]
        assert "WHERE" not in sql
        assert values == []

    def test_job_find_all_equity_flag(self):
        with patch("app.services.job_service.get_db_session"), \
                patch("app.services.job_service.execute_raw_sql",
                      return_value=[]) as execute:
            JobService().find_all(min_salary=150, has_equity=True)

        sql, values = execute.call_args.args[1:]
        assert 'WHERE "salary" >= $1 AND "equity" > 0' in sql
        assert values == [150]

    def test_user_update_hashes_password(self):
        row = {"username": "u1", "first_name": "U1F", "last_name": "U1L",
               "email": "u1@email.com", "is_admin": False}
        with patch("app.services.user_service.get_db_session"), \
                patch("app.services.user_service.hash_password", return_value="$2b$hashed"), \
                patch("app.services.user_service.execute_raw_sql",
                      return_value=[row]) as execute:
            UserService().update("u1", {"password": "newPassword", "isAdmin": True})

        sql, values = execute.call_args.args[1:]
        assert '"password"=$1, "is_admin"=$2' in sql
        assert values == ["$2b$hashed", True, "u1"]


class TestStoreOutcomes:
    """Zero affected rows and constraint violations"""

    def test_update_no_rows_is_not_found(self):
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql", return_value=[]):
            with pytest.raises(AppError) as exc_info:
                CompanyService().update("nope", {"name": "New"})

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_remove_no_rows_is_not_found(self):
        with patch("app.services.job_service.get_db_session"), \
                patch("app.services.job_service.execute_raw_sql", return_value=[]):
            with pytest.raises(AppError) as exc_info:
                JobService().remove(0)

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    def test_integrity_error_is_bad_request(self):
        violation = IntegrityError("INSERT INTO companies", {}, Exception("duplicate key"))
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql", side_effect=violation):
            with pytest.raises(AppError) as exc_info:
                CompanyService().create({
                    "handle": "c1", "name": "C1", "description": "Desc1",
                })

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.__cause__ is violation

    def test_job_update_integrity_error_is_bad_request(self):
        violation = IntegrityError("UPDATE jobs", {}, Exception('null value in column "title"'))
        with patch("app.services.job_service.get_db_session"), \
                patch("app.services.job_service.execute_raw_sql", side_effect=violation):
            with pytest.raises(AppError) as exc_info:
                JobService().update(1, {"title": None})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.__cause__ is violation

    def test_company_update_violation_message_is_neutral(self):
        violation = IntegrityError("UPDATE companies", {}, Exception('null value in column "description"'))
        with patch("app.services.company_service.get_db_session"), \
                patch("app.services.company_service.execute_raw_sql", side_effect=violation):
            with pytest.raises(AppError) as exc_info:
                CompanyService().update("c1", {"description": None})

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.message == "Invalid company data: c1"

    def test_unknown_user_is_unauthorized(self):
        with patch("app.services.user_service.get_db_session"), \
                patch("app.services.user_service.execute_raw_sql", return_value=[]):
            with pytest.raises(AppError) as exc_info:
                UserService().authenticate("nope", "password")

        assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
