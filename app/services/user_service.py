"""
User Service - accounts, password authentication and job applications.

Passwords are only ever stored as bcrypt hashes and are never returned.
"""

import logging
from typing import Any, List, Mapping, Union

from app.core.auth import hash_password, verify_password
from app.core.errors import AppError
from app.db.postgres import get_db_session, execute_raw_sql
from app.schemas.schemas import User, UserDetail, UserRegister, UserUpdate
from app.services.common import classify_store_errors, update_fields, validate_payload
from app.utils.sql import build_set_clause

logger = logging.getLogger(__name__)

USER_COLUMNS = "username, first_name, last_name, email, is_admin"

# Public field name -> column, where they differ
COLUMN_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


class UserService:

    def authenticate(self, username: str, password: str) -> User:
        """
        Check a username/password pair.

        Raises:
            AppError(UNAUTHORIZED) if the user is unknown or the password is wrong.
        """
        with get_db_session() as db:
            rows = execute_raw_sql(
                db,
                f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
                [username]
            )

        if rows:
            user = rows[0]
            if verify_password(password, user.pop("password")):
                return User.model_validate(user)

        logger.info("Failed login for %s", username)
        raise AppError.unauthorized("Invalid username/password")

    def register(self, data: Union[UserRegister, Mapping[str, Any]]) -> User:
        """
        Register a user, hashing the password.

        Raises:
            AppError(BAD_REQUEST) on duplicate username.
        """
        user = validate_payload(UserRegister, data)

        with classify_store_errors(f"Duplicate username: {user.username}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {USER_COLUMNS}
                    """,
                    [user.username, hash_password(user.password), user.first_name,
                     user.last_name, user.email, user.is_admin]
                )

        logger.info("Registered user %s", user.username)
        return User.model_validate(rows[0])

    def find_all(self) -> List[User]:
        with get_db_session() as db:
            rows = execute_raw_sql(db, f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
        return [User.model_validate(r) for r in rows]

    def get(self, username: str) -> UserDetail:
        """Get a user with the ids of the jobs they applied to."""
        with get_db_session() as db:
            rows = execute_raw_sql(
                db, f"SELECT {USER_COLUMNS} FROM users WHERE username = $1", [username]
            )
            if not rows:
                raise AppError.not_found(f"No user: {username}")

            applications = execute_raw_sql(
                db,
                "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
                [username]
            )

        return UserDetail(**rows[0], applications=[a["job_id"] for a in applications])

    def update(self, username: str, data: Union[UserUpdate, Mapping[str, Any]]) -> User:
        """
        Update only the fields present in `data`. A new password is hashed first.

        Raises:
            AppError(BAD_REQUEST) for empty data or non-updatable fields.
            AppError(NOT_FOUND) if no such user.
        """
        fields = update_fields(UserUpdate, data)
        if fields.get("password") is not None:
            fields["password"] = hash_password(fields["password"])

        set_clause, values = build_set_clause(fields, COLUMN_MAP)
        username_idx = len(values) + 1

        with classify_store_errors(f"Invalid update for user: {username}"):
            with get_db_session() as db:
                rows = execute_raw_sql(
                    db,
                    f"""
                    UPDATE users SET {set_clause}
                    WHERE username = ${username_idx}
                    RETURNING {USER_COLUMNS}
                    """,
                    [*values, username]
                )

        if not rows:
            raise AppError.not_found(f"No user: {username}")
        return User.model_validate(rows[0])

    def remove(self, username: str) -> None:
        with get_db_session() as db:
            rows = execute_raw_sql(
                db, "DELETE FROM users WHERE username = $1 RETURNING username", [username]
            )

        if not rows:
            raise AppError.not_found(f"No user: {username}")
        logger.info("Removed user %s", username)

    def apply_to_job(self, username: str, job_id: int) -> None:
        """
        Record that `username` applied to `job_id`.

        Raises:
            AppError(NOT_FOUND) if the job or the user does not exist.
            AppError(BAD_REQUEST) if the user already applied.
        """
        with classify_store_errors(f"Duplicate application: {username} -> {job_id}"):
            with get_db_session() as db:
                if not execute_raw_sql(db, "SELECT id FROM jobs WHERE id = $1", [job_id]):
                    raise AppError.not_found(f"No job: {job_id}")

                if not execute_raw_sql(
                    db, "SELECT username FROM users WHERE username = $1", [username]
                ):
                    raise AppError.not_found(f"No username: {username}")

                execute_raw_sql(
                    db,
                    "INSERT INTO applications (job_id, username) VALUES ($1, $2)",
                    [job_id, username]
                )

        logger.info("User %s applied to job %s", username, job_id)
