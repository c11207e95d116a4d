# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Argument vectors for the REG command-line tool.

Each builder method returns the arguments that follow the executable name.
Nothing here spawns a process; invalid input raises InvalidArgumentError
before the caller gets a chance to.
"""

from typing import List, Union

from .exceptions import InvalidArgumentError
from .models import Location, ValueType

QUERY = "QUERY"
ADD = "ADD"
DELETE = "DELETE"

FORCE = "/f"


def validate_name(name: str) -> str:
    """Value names travel as a single argument and come back on a single line"""
    if not isinstance(name, str):
        raise InvalidArgumentError("illegal value name specified.", field="name", value=name)
    if any(ch in name for ch in ("\r", "\n", "\x00")):
        raise InvalidArgumentError(
            "value names cannot contain line breaks or NUL characters.",
            field="name",
            value=name,
        )
    return name


def _name_args(name: str) -> List[str]:
    # An empty name addresses the key's default value
    return ["/ve"] if name == "" else ["/v", name]


class RegCommandBuilder:
    """Maps each registry operation to the argument vector REG expects"""

    def list_values(self, location: Location) -> List[str]:
        return [QUERY, location.path]

    def list_subkeys(self, location: Location) -> List[str]:
        # Same query as list_values; the parser tells the two apart
        return [QUERY, location.path]

    def get_value(self, location: Location, name: str) -> List[str]:
        return [QUERY, location.path] + _name_args(validate_name(name))

    def set_value(
        self,
        location: Location,
        name: str,
        value_type: Union[ValueType, str],
        value: str,
    ) -> List[str]:
        value_type = ValueType.parse(value_type)
        name = validate_name(name)
        if not isinstance(value, str):
            raise InvalidArgumentError("illegal value specified.", field="value", value=value)

        return (
            [ADD, location.path]
            + _name_args(name)
            + ["/t", value_type.value, "/d", value, FORCE]
        )

    def remove_value(self, location: Location, name: str) -> List[str]:
        return [DELETE, location.path, FORCE] + _name_args(validate_name(name))

    def erase_key(self, location: Location) -> List[str]:
        """Deletes every value of the key but keeps the key itself"""
        return [DELETE, location.path, FORCE, "/va"]

    def create_key(self, location: Location) -> List[str]:
        return [ADD, location.path]

    def delete_key(self, location: Location) -> List[str]:
        """Deletes the key together with all of its subkeys"""
        return [DELETE, location.path, FORCE]
