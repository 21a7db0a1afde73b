"""
Delivery domain values

SubscriberEmail wraps an address that has already passed validation, so the
email client can use it without checking it again.
"""
from dataclasses import dataclass

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError

_email_adapter = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class SubscriberEmail:
    """A syntactically valid email address. Build it with parse()."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberEmail":
        """
        Validate raw and wrap it

        Args:
            raw: Address as typed by the user or read from configuration

        Returns:
            SubscriberEmail for the normalized address

        Raises:
            ValidationError: If raw is not a valid email address
        """
        try:
            normalized = _email_adapter.validate_python(raw)
        except PydanticValidationError as e:
            raise ValidationError(f"{raw!r} is not a valid subscriber email", field="email") from e
        return cls(normalized)

    def as_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value
