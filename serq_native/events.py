"""LogEvent model, payload validation, and the human-readable line format."""

import json
import logging
from dataclasses import dataclass

import jsonschema

from serq_native.errors import PayloadParseError

# Fields missing from the payload (or sent as null) take these values.
# source and stack have no default: absent means the line is omitted.
EVENT_DEFAULTS = {
    "level": "log",
    "message": "",
    "timestamp": "",
}

_OPTIONAL_STRING = {"type": ["string", "null"]}

EVENT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "level": _OPTIONAL_STRING,
        "message": _OPTIONAL_STRING,
        "timestamp": _OPTIONAL_STRING,
        "source": _OPTIONAL_STRING,
        "stack": _OPTIONAL_STRING,
    },
}

_validator = jsonschema.Draft202012Validator(EVENT_SCHEMA)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEvent:
    level: str = EVENT_DEFAULTS["level"]
    message: str = EVENT_DEFAULTS["message"]
    timestamp: str = EVENT_DEFAULTS["timestamp"]
    source: str | None = None
    stack: str | None = None


def _string_or_none(value):
    return value if isinstance(value, str) else None


def event_from_dict(data: dict) -> LogEvent:
    """Build a LogEvent from a decoded dict, applying EVENT_DEFAULTS.

    Fields that are missing or not strings count as absent.
    """
    values = {}
    for field, default in EVENT_DEFAULTS.items():
        value = _string_or_none(data.get(field))
        values[field] = default if value is None else value
    return LogEvent(
        source=_string_or_none(data.get("source")),
        stack=_string_or_none(data.get("stack")),
        **values,
    )


def usable_fields(data) -> dict:
    """Return the known fields of ``data`` whose values match EVENT_SCHEMA.

    A document that is not an object yields no fields.
    """
    if not isinstance(data, dict):
        return {}
    rejected = {err.path[0] for err in _validator.iter_errors(data) if err.path}
    if rejected:
        logger.debug("Ignoring log entry fields with unexpected types: %s", sorted(rejected))
    return {
        field: value for field, value in data.items()
        if field in EVENT_SCHEMA["properties"] and field not in rejected
    }


def parse_event(payload: str) -> LogEvent:
    """Decode a JSON payload into a LogEvent.

    Raises PayloadParseError only when the text is not JSON. A document that
    is not an object, or a field that is not a string, falls back to the
    defaults.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise PayloadParseError(str(e)) from e

    return event_from_dict(usable_fields(data))


def _stack_lines(stack: str) -> list[str]:
    lines = stack.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def render_event(event: LogEvent) -> str:
    """Render an event as one newline-terminated block of text.

    [TIMESTAMP] LEVEL: message
      at source
      stack line 1
      stack line 2
    """
    parts = [f"[{event.timestamp}] {event.level.upper()}: {event.message}"]
    if event.source is not None:
        parts.append(f"  at {event.source}")
    if event.stack is not None:
        for line in _stack_lines(event.stack):
            parts.append(f"  {line}")
    return "\n".join(parts) + "\n"
