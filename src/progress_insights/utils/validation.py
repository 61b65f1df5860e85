"""Field validation utilities for raw tracker records.

Records arrive as plain mappings exported from the tracker's REST API
(camelCase keys) or written by hand (snake_case keys). This module reads
individual fields out of such mappings, coercing them to the types the
domain records expect and reporting problems consistently.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .datetime import parse_datetime

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"_([a-z])")

_MISSING = object()


class RecordValidationError(Exception):
    """Exception raised when a raw record cannot be turned into a domain record."""

    def __init__(self, message: str, record_type: str, field_name: str, value: Any = None,
                 suggestions: Optional[List[str]] = None):
        self.record_type = record_type
        self.field_name = field_name
        self.value = value
        self.suggestions = suggestions or []
        super().__init__(message)


def camel_case(name: str) -> str:
    """Convert a snake_case field name to its camelCase spelling."""
    return _CAMEL_BOUNDARY.sub(lambda m: m.group(1).upper(), name)


class RecordValidator:
    """Reads typed fields out of a raw record mapping."""

    def __init__(self, record_type: str, data: Mapping[str, Any], strict_mode: bool = False):
        """Initialize the validator.

        Args:
            record_type: Name of the record kind, used in error messages
            data: Raw record mapping
            strict_mode: If True, raise on malformed optional fields.
                        If False, log a warning and drop the value.
        """
        if not isinstance(data, Mapping):
            raise RecordValidationError(
                f"{record_type} record must be a mapping, got {type(data).__name__}",
                record_type, "<record>", data,
            )
        self.record_type = record_type
        self.data = data
        self.strict_mode = strict_mode
        self.validation_warnings: List[Dict[str, Any]] = []

    def raw(self, field_name: str, default: Any = None) -> Any:
        """Return the raw value under the snake_case or camelCase key."""
        value = self.data.get(field_name, _MISSING)
        if value is _MISSING:
            value = self.data.get(camel_case(field_name), _MISSING)
        return default if value is _MISSING else value

    def required(self, field_name: str) -> Any:
        value = self.raw(field_name)
        if value is None or value == "":
            raise RecordValidationError(
                f"{self.record_type} record is missing required field '{field_name}'",
                self.record_type, field_name, value,
                ["Export records from the tracker API", f"Add a '{field_name}' key"],
            )
        return value

    def string(self, field_name: str, required: bool = False, default: Optional[str] = None) -> Optional[str]:
        value = self.required(field_name) if required else self.raw(field_name)
        if value is None:
            return default
        return str(value)

    def timestamp(self, field_name: str, required: bool = False) -> Optional[datetime]:
        value = self.required(field_name) if required else self.raw(field_name)
        if value is None:
            return None
        try:
            return parse_datetime(value)
        except (TypeError, ValueError):
            return self._handle_error(
                f"Field '{field_name}' of {self.record_type} is not an ISO datetime: {value!r}",
                field_name, value, required,
                ["Use ISO 8601 strings such as 2024-05-01T09:30:00Z"],
            )

    def integer(self, field_name: str, required: bool = False, default: Optional[int] = None) -> Optional[int]:
        value = self.required(field_name) if required else self.raw(field_name)
        if value is None:
            return default
        if isinstance(value, bool):
            self._handle_error(
                f"Field '{field_name}' of {self.record_type} must be a number, got a boolean",
                field_name, value, required,
            )
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            self._handle_error(
                f"Field '{field_name}' of {self.record_type} must be an integer: {value!r}",
                field_name, value, required,
            )
            return default

    def number(self, field_name: str, required: bool = False) -> Optional[float]:
        value = self.required(field_name) if required else self.raw(field_name)
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return self._handle_error(
                f"Field '{field_name}' of {self.record_type} must be numeric: {value!r}",
                field_name, value, required,
            )

    def boolean(self, field_name: str, default: bool = False) -> bool:
        value = self.raw(field_name)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes", "y")
        return bool(value)

    def string_list(self, field_name: str) -> List[str]:
        value = self.raw(field_name)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]

    def _handle_error(self, message: str, field_name: str, value: Any, required: bool,
                      suggestions: Optional[List[str]] = None) -> None:
        """Raise for required fields or strict mode, otherwise warn and drop."""
        if required or self.strict_mode:
            raise RecordValidationError(message, self.record_type, field_name, value, suggestions)

        logger.warning("%s; ignoring value", message)
        self.validation_warnings.append({
            'field': field_name,
            'message': message,
            'value': value,
        })
        return None
