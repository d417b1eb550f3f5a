# src/taskboard/tasks/validation.py

"""
Input validation for task mutations.

Each mutation kind has its own input model (see task_models). These helpers
accept either the model itself or a plain mapping (form / CLI payload) and
return a validated model, raising the domain ValidationError on failure.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import FieldError, ValidationError
from .task_models import CreateTaskInput, ToggleInput, UpdateTaskInput

_M = TypeVar("_M", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def _reason(msg: str) -> str:
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX) :]
    return msg


def to_field_errors(exc: PydanticValidationError) -> list[FieldError]:
    out: list[FieldError] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__all__"
        if err.get("type") == "extra_forbidden":
            reason = "unknown field"
        else:
            reason = _reason(str(err.get("msg", "invalid")))
        out.append(FieldError(field, reason))
    return out


def _validate(model: type[_M], data: _M | Mapping[str, Any]) -> _M:
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError.single("__all__", f"expected a mapping, got {type(data).__name__}")
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(to_field_errors(e)) from None


def validate_create(data: CreateTaskInput | Mapping[str, Any]) -> CreateTaskInput:
    return _validate(CreateTaskInput, data)


def validate_update(data: UpdateTaskInput | Mapping[str, Any]) -> UpdateTaskInput:
    upd = _validate(UpdateTaskInput, data)
    if not upd.model_fields_set:
        raise ValidationError.single("__all__", "no fields to update")
    return upd


def validate_toggle(data: ToggleInput | Mapping[str, Any]) -> ToggleInput:
    return _validate(ToggleInput, data)
