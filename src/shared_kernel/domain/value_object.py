"""
Shared Kernel Value Objects.

Immutable, attribute-compared building blocks. Only the validation contract
lives here; services are free to apply stricter rules downstream.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class ValueObject(BaseModel):
    """
    Base class for value objects.

    Value objects have no identity: two instances with equal attributes are
    interchangeable. They are frozen and therefore hashable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


class SingleValueObject(ValueObject):
    """Value object wrapping a single string ``value``."""

    value: str

    def __str__(self) -> str:
        return self.value


_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,6}$")
_PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")
_URL_SCHEMES = frozenset({"http", "https", "ftp"})


class Email(SingleValueObject):
    """Email address in the ``local@domain.tld`` form."""

    @field_validator("value")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Email cannot be blank")
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]


class Phone(SingleValueObject):
    """International phone number: optional leading ``+`` and 10-15 digits."""

    @field_validator("value")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Phone cannot be blank")
        if not _PHONE_PATTERN.match(v):
            raise ValueError("Invalid phone number format")
        return v


class Url(SingleValueObject):
    """Absolute URL with a scheme and a host."""

    @field_validator("value")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("URL cannot be blank.")
        parsed = urlparse(v)
        if parsed.scheme.lower() not in _URL_SCHEMES or not parsed.netloc:
            raise ValueError("Invalid URL format.")
        return v


class Address(ValueObject):
    """Postal address; ``zip_code`` is kept as provided."""

    street: str
    city: str
    country: str
    zip_code: str | None = None

    @field_validator("street", "city", "country")
    @classmethod
    def validate_not_blank(cls, v: str, info: ValidationInfo) -> str:
        if not v.strip():
            raise ValueError(f"Address {info.field_name} cannot be blank")
        return v
