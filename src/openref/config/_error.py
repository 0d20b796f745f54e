from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from openref.core.errors import OpenRefError

if TYPE_CHECKING:
    from jsonschema import ValidationError

TYPE_PHRASES = {
    "object": "an object",
    "array": "an array",
    "number": "a number",
    "boolean": "a boolean",
    "string": "a string",
    "integer": "an integer",
    "null": "null",
}


class ConfigError(OpenRefError):
    """Invalid configuration."""

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> ConfigError:
        message = error.message
        if error.validator == "type":
            message = _format_type_error(error)
        elif error.validator == "additionalProperties":
            message = _format_additional_properties_error(error)
        elif error.validator == "minLength":
            message = f"Error in {_section(error)} section:\n  '{error.path[-1]}' -> Must not be empty."
        return cls(message)


def _section(error: ValidationError) -> str:
    path = [str(part) for part in list(error.path)[:-1]]
    return f"[{'.'.join(path)}]" if path else "root"


def _format_type_error(error: ValidationError) -> str:
    expected = error.validator_value
    types = [expected] if isinstance(expected, str) else list(expected)
    phrase = " or ".join(TYPE_PHRASES.get(name, name) for name in types)
    return (
        f"Error in {_section(error)} section:\n  Type error:\n\n"
        f"  - '{error.path[-1]}' -> Must be {phrase}, "
        f"but got {type(error.instance).__name__}: {error.instance}"
    )


def _format_additional_properties_error(error: ValidationError) -> str:
    valid = list(error.schema.get("properties", {}))
    unknown = sorted(set(error.instance) - set(valid))
    details = []
    for name in unknown:
        matches = difflib.get_close_matches(name, valid, n=1)
        if matches:
            details.append(f"  - '{name}' -> Did you mean '{matches[0]}'?")
        else:
            details.append(f"  - '{name}'")
    path = [str(part) for part in error.path]
    section = f"[{'.'.join(path)}]" if path else "root"
    valid_list = ", ".join(f"'{name}'" for name in valid)
    return (
        f"Error in {section} section:\n  Unknown properties:\n\n"
        + "\n".join(details)
        + f"\n\nValid properties for {section} are: {valid_list}."
    )
