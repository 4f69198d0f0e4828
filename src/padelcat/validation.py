"""Argument and record validation.

Two layers:

* ``require_string`` / ``require_string_list`` check call arguments before
  any I/O happens.
* ``validate_record`` runs a dict through a Pydantic model and converts
  Pydantic's error into padelcat's ValidationError, so callers only ever
  see the padelcat hierarchy.
"""

import logging

import pydantic

from padelcat.exceptions import ValidationError

logger = logging.getLogger(__name__)


def require_string(value: object, name: str) -> str:
    """Return ``value`` if it is a string that is not blank.

    Raises:
        ValidationError: If ``value`` is not a str or is empty after strip.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} is not string")
    if not value.strip():
        raise ValidationError(f"{name} cannot be empty")
    return value


def require_string_list(value: object, name: str) -> list[str]:
    """Return ``value`` as a list if it is a list/tuple of non-blank strings."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} is not a list")
    return [require_string(item, f"{name}[{i}]") for i, item in enumerate(value)]


def validate_record(data: dict, model_cls: type[pydantic.BaseModel]):
    """Validate ``data`` against ``model_cls`` and return the model instance.

    Raises:
        ValidationError: With Pydantic's per-field messages joined.
    """
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        logger.debug("Validation failed for %s: %s", model_cls.__name__, messages)
        raise ValidationError(
            f"Invalid {model_cls.__name__}: {messages}"
        ) from e
