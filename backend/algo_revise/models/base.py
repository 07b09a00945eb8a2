"""
Base Models for Validation

This module provides base classes with consistent validation settings for
domain records and request/response payloads.

Usage:
    # For inbound payloads (strictest validation)
    class OutcomeRequest(StrictRequest):
        performance_score: int

    # For records loaded from storage (allows extra columns)
    class ProblemRecord(DomainModel):
        id: str

    # For immutable records and derived values
    class SessionRecord(FrozenRecord):
        id: str

Architecture:
    Caller payload → StrictRequest (extra="forbid") → Core
    Storage record → DomainModel (extra="ignore") → Core
    Core → FrozenRecord / StrictResponse → Caller
"""

from pydantic import BaseModel, ConfigDict


class StrictRequest(BaseModel):
    """
    Base model for inbound payloads with strict validation.

    Rejects any fields not explicitly declared in the model, catching
    caller typos and mismatches early.

    Features:
        - extra="forbid": Unknown fields raise a validation error
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
        - from_attributes=True: Allows ORM model conversion
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for outbound payloads.

    Still enforces type validation but allows extra fields.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class DomainModel(BaseModel):
    """
    Base model for mutable domain records loaded from storage.

    Storage layers may carry more columns than the core needs; those are
    ignored. Records are never mutated in place by the core; updates are
    produced as copies.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class FrozenRecord(BaseModel):
    """
    Base model for immutable records.

    Assigning to any attribute after construction raises.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        from_attributes=True,
    )
