"""Parameter models for command binding."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from connmate.types import ParametersType

PARAMETER_SIGILS = "@:$"


class DbParameter(BaseModel):
    """A named command parameter."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(..., min_length=1, description="Parameter name, sigil optional")
    value: Any = Field(default=None, description="Bound value")
    db_type: str | None = Field(default=None, description="Optional driver type hint")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.lstrip(PARAMETER_SIGILS):
            raise ValueError("Parameter name must contain more than a sigil")
        return v

    @property
    def bare_name(self) -> str:
        """Name without its leading ``@``, ``:`` or ``$`` sigil."""
        return self.name.lstrip(PARAMETER_SIGILS)


def to_parameters(parameters: ParametersType) -> list[DbParameter]:
    """Normalize the accepted parameter shapes to an ordered list.

    Accepts ``DbParameter`` instances, ``(name, value)`` tuples, or a mapping
    of name to value.
    """
    if parameters is None:
        return []
    if isinstance(parameters, Mapping):
        return [DbParameter(name=name, value=value) for name, value in parameters.items()]

    result = []
    for item in parameters:
        if isinstance(item, DbParameter):
            result.append(item)
        elif isinstance(item, tuple) and len(item) == 2:
            result.append(DbParameter(name=item[0], value=item[1]))
        else:
            raise TypeError(f"Unsupported parameter: {item!r}")
    return result
