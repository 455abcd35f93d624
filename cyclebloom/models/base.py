"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BloomBase(BaseModel):
    """Base model with shared config for all CycleBloom schemas.

    Fields are snake_case in Python and camelCase on the wire, matching the
    log store and the LLM predictor contract.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
