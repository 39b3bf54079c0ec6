"""Interpretation of procedure return codes and generated identities."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

SUCCESS_CODE = 1


def is_success_code(value: Any) -> bool:
    """Return whether a procedure return code signals success.

    Only an integer equal to exactly `1` succeeds. `None`, `0`, negative
    values, booleans and non-integers are failures.
    """

    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value == SUCCESS_CODE


def coerce_identity(value: Any) -> Optional[int]:
    """Convert an output id parameter value to an integer identity.

    Returns `None` when the database left the value unset. Integral
    decimals, floats and numeric strings are converted; anything else
    raises `TypeError` or `ValueError`.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (Decimal, float)):
        if value != int(value):
            raise ValueError(f"Output identity {value!r} is not an integer.")
        return int(value)
    if isinstance(value, (str, bytes)):
        return int(value)
    raise TypeError(f"Unsupported output identity type: {type(value).__name__}.")


def new_identity(value: Any) -> Optional[int]:
    """Return the generated id when it is positive, otherwise `None`."""

    identity = coerce_identity(value)
    if identity is None or identity <= 0:
        return None
    return identity
