"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

if TYPE_CHECKING:
    from reqcheck.core.errors import ServiceError

UNDEFINED_KEY = "undefined"


class FieldError(BaseModel):
    """Single field-level validation or service issue."""

    model_config = ConfigDict(frozen=True)

    key: str = UNDEFINED_KEY
    message: str = Field(
        validation_alias=AliasChoices("message", "description"),
        serialization_alias="description",
    )
    code: str
    args: list[str] = Field(default_factory=list)

    def as_service_error(self, status_code: int) -> ServiceError:
        """Wrap this error alone in a service error carrying ``status_code``."""
        from reqcheck.core.errors import ServiceError

        return ServiceError(status_code, [self])


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    errors: list[FieldError]
