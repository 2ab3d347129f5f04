"""
SQL fragment builders.

Both builders are pure: they return clause text with `$N` placeholders
plus the list of values to bind, and never touch the database.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from app.core.errors import AppError

Updates = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def quote_identifier(name: str) -> str:
    """Double-quote a column name, doubling any embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def build_set_clause(
    updates: Updates,
    column_map: Mapping[str, str],
    start: int = 1,
) -> tuple[str, list]:
    """
    Build the SET clause of a partial UPDATE.

    Args:
        updates: fields to change, as a mapping or as (field, value) pairs
            {"firstName": "Aliya", "age": 32}
        column_map: field name -> column name, for fields whose column differs
            {"firstName": "first_name"}
        start: index of the first placeholder

    Returns:
        (set_clause, values) tuple
        - set_clause: '"first_name"=$1, "age"=$2'
        - values: ["Aliya", 32]

    Raises:
        AppError(BAD_REQUEST) when there is nothing to update.
    """
    if isinstance(updates, Mapping):
        pairs = list(updates.items())
    else:
        pairs = list(updates)

    if not pairs:
        raise AppError.bad_request("No data")

    set_parts = []
    values = []

    for position, (field_name, value) in enumerate(pairs, start=start):
        column_name = column_map.get(field_name, field_name)
        set_parts.append(f"{quote_identifier(column_name)}=${position}")
        values.append(value)

    return ", ".join(set_parts), values


@dataclass(frozen=True)
class FilterColumns:
    """Columns an entity exposes to filtering. Unset columns cannot be filtered on."""
    range_column: Optional[str] = None
    text_column: Optional[str] = None
    flag_column: Optional[str] = None


@dataclass
class FilterCriteria:
    min_bound: Any = None
    max_bound: Any = None
    name_like: Optional[str] = None
    flag: bool = False


def build_filter_clause(
    criteria: FilterCriteria,
    columns: FilterColumns,
) -> tuple[str, list]:
    """
    Build the WHERE predicates (without the WHERE keyword) for a filtered SELECT.

    Predicates come in a fixed order: min bound, max bound, substring, flag.
    The flag is a numeric "> 0" test and binds no value.
    Returns ("", []) when no criterion is present.
    """
    if (
        criteria.min_bound is not None
        and criteria.max_bound is not None
        and criteria.min_bound > criteria.max_bound
    ):
        raise AppError.bad_request("Min cannot be greater than max")

    where_parts = []
    values = []

    if columns.range_column:
        column = quote_identifier(columns.range_column)
        if criteria.min_bound is not None:
            values.append(criteria.min_bound)
            where_parts.append(f"{column} >= ${len(values)}")
        if criteria.max_bound is not None:
            values.append(criteria.max_bound)
            where_parts.append(f"{column} <= ${len(values)}")

    if columns.text_column and criteria.name_like is not None:
        values.append(f"%{criteria.name_like}%")
        where_parts.append(f"{quote_identifier(columns.text_column)} ILIKE ${len(values)}")

    if columns.flag_column and criteria.flag:
        where_parts.append(f"{quote_identifier(columns.flag_column)} > 0")

    return " AND ".join(where_parts), values
