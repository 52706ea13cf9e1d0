"""Shared helpers for resource wrappers.

Resources validate their input before sending anything, so a
ValidationError always means no request was made.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from zai_payment.client import Client
from zai_payment.config import CORE_BASE, ZaiConfig
from zai_payment.errors import ValidationError


def is_blank(value: Any) -> bool:
    """True for None and for values that are empty once stringified and stripped."""
    return value is None or not str(value).strip()


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    return False


def validate_id(value: Any, field_name: str) -> None:
    """Raise ValidationError if an identifier is missing."""
    if is_blank(value):
        raise ValidationError(f"{field_name} is required and cannot be blank")


def require_fields(attributes: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Raise ValidationError listing every required field that is blank."""
    missing = [name for name in fields if is_blank(attributes.get(name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def validate_choice(value: Any, field_name: str, choices: Iterable[str]) -> None:
    choices = list(choices)
    if str(value).lower() not in choices:
        raise ValidationError(f"{field_name} must be one of: {', '.join(choices)}")


def build_body(attributes: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """Keep the known fields, dropping None and empty values.

    False and 0 are kept. Unknown attribute names are dropped.
    """
    allowed = set(fields)
    return {
        key: value
        for key, value in attributes.items()
        if key in allowed and not is_empty(value)
    }


def compact(params: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None values from query parameters."""
    return {key: value for key, value in params.items() if value is not None}


class Resource:
    """Base class for resource wrappers.

    Subclasses set ``base_endpoint`` to the endpoint serving their API.
    """

    base_endpoint: ClassVar[str] = CORE_BASE

    def __init__(self, client: Client) -> None:
        self.client = client

    @classmethod
    def endpoint_for(cls, config: ZaiConfig) -> str:
        """Base endpoint name to build this resource's client with."""
        return cls.base_endpoint

    @property
    def config(self) -> ZaiConfig:
        return self.client.config

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.client.base_url!r})"
