"""Utility functions for DataGate."""

from collections.abc import Mapping
from typing import Any

from namerec.datagate.core.exceptions import DataGateValidationError


def is_blank(value: Any) -> bool:
    """
    Check if a required identifier value is effectively missing.

    None, empty strings, zero and empty containers are all considered blank.

    Args:
        value: Value to check

    Returns:
        True if value is blank
    """
    if isinstance(value, bool):
        return not value
    if isinstance(value, str):
        return not value.strip()
    return not value


def require_target(project_id: Any, instance_id: Any, table: Any) -> None:
    """
    Validate the identifiers every engine call needs.

    Args:
        project_id: Project identifier
        instance_id: Instance identifier
        table: Table name

    Raises:
        DataGateValidationError: If any identifier is missing, zero or empty
    """
    missing = [
        name
        for name, value in (('project_id', project_id), ('id_instancia', instance_id), ('table', table))
        if is_blank(value)
    ]
    if missing:
        msg = f'{", ".join(missing)} required'
        raise DataGateValidationError(msg, field_name=missing[0])

    if not isinstance(table, str):
        msg = f'table must be a string, got {type(table).__name__}'
        raise DataGateValidationError(msg, field_name='table')


def require_fields(payload: Mapping[str, Any], *names: str, table: str | None = None) -> None:
    """
    Validate that non-blank values are present for the given keys.

    Args:
        payload: Mapping to inspect
        *names: Required keys
        table: Optional table name for error context

    Raises:
        DataGateValidationError: If a key is missing or blank
    """
    for name in names:
        if is_blank(payload.get(name)):
            msg = f'{name} is required'
            raise DataGateValidationError(msg, field_name=name, table=table)
