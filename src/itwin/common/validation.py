#  Copyright © 2025 Bentley Systems, Incorporated
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#      http://www.apache.org/licenses/LICENSE-2.0
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
"""Local checks on request models, applied before any request is sent."""

from __future__ import annotations

from pydantic import BaseModel

from .exceptions import RequiredError
from .operations import is_null_or_whitespace

__all__ = [
    "require",
    "require_any_field",
    "require_value",
]


def require(valid: bool, field: str, operation: str, problem: str = "was missing or invalid") -> None:
    if not valid:
        raise RequiredError(field, f"Required field {field} {problem} when calling {operation}.")


def require_value(value: str | None, field: str, operation: str, optional: bool = False) -> None:
    """Require a string that is not empty or whitespace.

    :param value: The value to check.
    :param field: The field name to report.
    :param operation: The operation name to report.
    :param optional: Accept None as a valid value.

    :raises RequiredError: If the value is missing, empty or whitespace.
    """
    if optional and value is None:
        return
    require(not is_null_or_whitespace(value), field, operation, "was null or empty")


def require_any_field(model: BaseModel, field: str, operation: str) -> None:
    """Require at least one field of an update model to be set to a value other than None."""
    if all(getattr(model, name) is None for name in type(model).model_fields):
        raise RequiredError(field, f"All fields of {field} were null or undefined when calling {operation}.")
