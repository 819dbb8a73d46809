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
from __future__ import annotations

from itwin.common.operations import is_null_or_whitespace, is_simple_identifier
from itwin.common.validation import require

from .data import DataType, ECProperty

__all__ = [
    "is_valid_ec_property",
    "require_identifier",
]


def is_valid_ec_property(prop: ECProperty) -> bool:
    """Check that an ECProperty names its schema, class and property, and has a defined type."""
    return (
        not is_null_or_whitespace(prop.ec_schema_name)
        and not is_null_or_whitespace(prop.ec_class_name)
        and not is_null_or_whitespace(prop.ec_property_name)
        and prop.ec_property_type is not None
        and prop.ec_property_type != DataType.UNDEFINED
    )


def require_identifier(name: str | None, field: str, operation: str, optional: bool = False) -> None:
    """Require a simple identifier, i.e., a valid mapping, group or property name.

    :param name: The value to check.
    :param field: The field name to report.
    :param operation: The operation name to report.
    :param optional: Accept None as a valid value.
    """
    if optional and name is None:
        return
    require(
        is_simple_identifier(name),
        field,
        operation,
        "was missing or not a valid identifier (a letter or underscore followed by letters, digits or underscores, "
        "at most 128 characters)",
    )
