# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Registry Adapter

Dictionary-in, dictionary-out access to RegistryClient.

Inputs:
    host:  remote host name (optional, default local)
    hive:  HKLM, HKCU, HKCR, HKU or HKCC (default HKLM)
    key:   key path with leading backslashes, e.g. "\\Software\\Example"
    name:  value name ("" for the default value)
    type:  value type token, e.g. "REG_SZ"
    value: value data as the tool expects it

Examples:
    await RegistryAdapter().execute("get_value", {
        "hive": "HKCU",
        "key": "\\Software\\Example",
        "name": "Sample",
    })
    # {"success": True, "data": {"name": "Sample", "type": "REG_SZ", ...}}
"""

from typing import Any, Dict, List, Optional

from ..base_adapter import BaseAdapter
from ..exceptions import InvalidArgumentError
from ..models import Hive, Location
from ..registry import RegistryClient


def location_from_inputs(inputs: Dict[str, Any]) -> Location:
    return Location(
        host=inputs.get("host") or "",
        hive=inputs.get("hive") or Hive.LOCAL_MACHINE,
        key=inputs.get("key") or "",
    )


def _require(inputs: Dict[str, Any], field: str) -> Any:
    if field not in inputs or inputs[field] is None:
        raise InvalidArgumentError(f"{field} is required", field=field)
    return inputs[field]


class RegistryAdapter(BaseAdapter):
    """Adapter exposing every registry operation by name"""

    def __init__(self, client: Optional[RegistryClient] = None):
        super().__init__("registry")
        self.client = client or RegistryClient()

        self.register_method("list_values", self.list_values)
        self.register_method("list_subkeys", self.list_subkeys)
        self.register_method("get_value", self.get_value)
        self.register_method("set_value", self.set_value)
        self.register_method("remove_value", self.remove_value)
        self.register_method("erase_key", self.erase_key)
        self.register_method("create_key", self.create_key)
        self.register_method("delete_key", self.delete_key)
        self.register_method("key_exists", self.key_exists)
        self.register_method("value_exists", self.value_exists)

    async def list_values(self, inputs: Dict[str, Any]) -> List[Dict[str, Any]]:
        records = await self.client.list_values(location_from_inputs(inputs))
        return [record.to_dict() for record in records]

    async def list_subkeys(self, inputs: Dict[str, Any]) -> List[Dict[str, Any]]:
        children = await self.client.list_subkeys(location_from_inputs(inputs))
        return [child.to_dict() for child in children]

    async def get_value(self, inputs: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = await self.client.get_value(
            location_from_inputs(inputs), _require(inputs, "name")
        )
        return record.to_dict() if record else None

    async def set_value(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        await self.client.set_value(
            location_from_inputs(inputs),
            _require(inputs, "name"),
            _require(inputs, "type"),
            _require(inputs, "value"),
        )
        return {"done": True}

    async def remove_value(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        await self.client.remove_value(
            location_from_inputs(inputs), _require(inputs, "name")
        )
        return {"done": True}

    async def erase_key(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        await self.client.erase_key(location_from_inputs(inputs))
        return {"done": True}

    async def create_key(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        await self.client.create_key(location_from_inputs(inputs))
        return {"done": True}

    async def delete_key(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        await self.client.delete_key(location_from_inputs(inputs))
        return {"done": True}

    async def key_exists(self, inputs: Dict[str, Any]) -> bool:
        return await self.client.key_exists(location_from_inputs(inputs))

    async def value_exists(self, inputs: Dict[str, Any]) -> bool:
        return await self.client.value_exists(
            location_from_inputs(inputs), _require(inputs, "name")
        )
