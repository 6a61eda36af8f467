"""Shared schema base: snake_case attributes, camelCase wire names.

Identifier fields keep the `...ID` spelling clients already use
(`event_id` <-> `eventID`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def to_wire_name(field_name: str) -> str:
    name = to_camel(field_name)
    if name.endswith("Id"):
        name = name[:-2] + "ID"
    return name


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_wire_name,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str
