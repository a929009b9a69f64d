"""Pydantic model for the ServiceView projection exchanged with callers."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ServiceView(BaseModel):
    """One environment joined with one of its builds.

    ``uuid`` is the build's external id and travels as ``id`` on the wire.
    ``ids`` and ``names`` are search filters only and are never emitted.
    The internal row identity is private: it is set when a view is
    materialized from the store and cannot be supplied by a caller.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ids: list[str] | None = Field(None, exclude=True)
    names: list[str] | None = Field(None, exclude=True)
    uuid: str = Field("", alias="id")
    user_id: int = 0
    datacenter_id: int = 0
    name: str = ""
    type: str = ""
    version: datetime | None = None
    status: str = ""
    options: dict[str, Any] | None = None
    credentials: dict[str, Any] | None = None
    definition: str = ""
    mapping: dict[str, Any] | None = None

    _row_id: int = PrivateAttr(default=0)

    @classmethod
    def from_stored(cls, row_id: int, **fields: Any) -> "ServiceView":
        view = cls.model_validate(fields)
        view._row_id = row_id or 0
        return view

    def has_id(self) -> bool:
        return self._row_id != 0

    @property
    def has_build_info(self) -> bool:
        return bool(self.uuid or self.type)

    def to_wire(self) -> dict[str, Any]:
        """Render the JSON object sent back to callers."""
        data = self.model_dump(mode="json", by_alias=True)
        if not self.definition:
            data.pop("definition")
        if not self.mapping:
            data.pop("mapping")
        return data
