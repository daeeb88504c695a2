"""
fpkit - Pydantic Models

Value-shape tag, the ordered-field Record container and library settings.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Shape(str, Enum):
    """Semantic shape of a runtime value"""
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    SCALAR = "scalar"


class Record(BaseModel):
    """
    Named-field structure with insertion-ordered fields.

    Declared fields come first, in definition order, followed by the pydantic
    extra store, so any string name can be read, written and added after
    construction. Attribute access works for names that don't clash with
    BaseModel attributes; the *_field methods always do.
    """
    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Any, Any]]) -> "Record":
        """Build a record from (name, value) pairs, later names overwrite earlier ones"""
        record = cls()
        for name, value in pairs:
            record.set_field(name, value)
        return record

    def _extra(self) -> Dict[str, Any]:
        if self.__pydantic_extra__ is None:
            object.__setattr__(self, "__pydantic_extra__", {})
        return self.__pydantic_extra__

    def _declared(self) -> List[str]:
        return list(type(self).model_fields)

    def get_field(self, name: Any, default: Any = None) -> Any:
        name = str(name)
        if name in type(self).model_fields:
            return getattr(self, name)
        return self._extra().get(name, default)

    def set_field(self, name: Any, value: Any) -> "Record":
        name = str(name)
        if name in type(self).model_fields:
            setattr(self, name, value)
        else:
            self._extra()[name] = value
        return self

    def has_field(self, name: Any) -> bool:
        name = str(name)
        return name in type(self).model_fields or name in self._extra()

    def field_names(self) -> List[str]:
        return self._declared() + list(self._extra())

    def field_items(self) -> List[Tuple[str, Any]]:
        declared = [(name, getattr(self, name)) for name in self._declared()]
        return declared + list(self._extra().items())

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.field_items())


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseModel):
    """Library-wide configuration"""
    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(
        default="WARNING",
        description="Level handed to logging.basicConfig"
    )
    default_batch_size: int = Field(
        default=100,
        ge=1,
        description="Batch size used when batch() is called without one"
    )
    strict_get: bool = Field(
        default=False,
        description="Make get() raise KeyNotFound instead of returning None"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalize and check the level name"""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level)
