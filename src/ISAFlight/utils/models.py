from enum import StrEnum
from typing import Any

from pydantic import BaseModel, model_validator


class CIStrEnum(StrEnum):
    """Case-insensitive string enumeration."""

    def __str__(self):
        """Normalize on output."""
        return self.value.lower()

    @classmethod
    def _missing_(cls, value):
        """Normalize on input."""
        if isinstance(value, str):
            value = value.lower()
            for member in cls:
                if member.value.lower() == value:
                    return member
        return None


class CIBaseModel(BaseModel):
    """Pydantic base model that recursively normalizes input keys to match
    lower-case model field names, so that configuration files can be written
    as `[Solver]` / `MaxIter = 50` or `[solver]` / `maxiter = 50`."""

    @classmethod
    def _normalize_dict(cls, values: dict) -> dict:
        normalized = {}
        field_map = {f.lower(): f for f in cls.model_fields}

        for k, v in values.items():
            field_name = field_map.get(k.lower(), k)
            field_info = cls.model_fields.get(field_name)

            # Nested models get their own keys normalized.
            if field_info is not None and isinstance(v, dict):
                field_type = field_info.annotation
                if isinstance(field_type, type) and issubclass(field_type, BaseModel):
                    v = field_type.model_validate(v)

            normalized[field_name] = v

        return normalized

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, values: Any) -> Any:
        if isinstance(values, dict):
            return cls._normalize_dict(values)
        return values
