"""
Base payload schemas for inbound socket events.

Payloads are opaque on the wire; the models only give typed access to the
fields the reconciliation layer reads and keep everything else.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class BasePayload(BaseModel):
    """
    Base model for all inbound event payloads.

    Unknown fields are preserved for forward compatibility and camelCase
    wire names are accepted through field aliases.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump back to the camelCase wire layout."""
        return self.model_dump(by_alias=True, exclude_none=True)
