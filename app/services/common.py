"""
Helpers shared by the entity services: payload validation and
classification of store constraint violations.
"""

import logging
from contextlib import contextmanager
from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError

from app.core.errors import AppError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def validate_payload(schema: Type[M], data: Union[M, Mapping[str, Any]]) -> M:
    """Coerce a create/update payload into `schema`, reporting failures as BAD_REQUEST."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise AppError.bad_request(f"Invalid data: {details}") from e


def update_fields(schema: Type[M], data: Union[M, Mapping[str, Any]]) -> dict:
    """
    Fields explicitly present in a partial update, keyed by their public
    (camelCase) names. Explicit None values are kept.
    """
    payload = validate_payload(schema, data)
    return payload.model_dump(by_alias=True, exclude_unset=True)


@contextmanager
def classify_store_errors(message: str):
    """Re-raise uniqueness / foreign-key violations from the store as BAD_REQUEST."""
    try:
        yield
    except IntegrityError as e:
        logger.warning("%s (%s)", message, e.orig)
        raise AppError.bad_request(message) from e
