"""
Utility functions for SNAP signing

This module provides timestamp generation and the JSON serialization and
minification used when digesting request bodies.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..crypto.primitives import to_utf8
from ..exceptions import SerializationError
from .types import Clock

_JSON_WHITESPACE = frozenset(' \t\n\r')
_JSON_STRING = re.compile(r'"(?:[^"\\\x00-\x1f]|\\["\\/bfnrt]|\\u[0-9a-fA-F]{4})*"')
_JSON_NUMBER = re.compile(r'-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?')
_JSON_LITERALS = ('true', 'false', 'null')
_JSON_CLOSERS = {'[': ']', '{': '}'}

# Deepest nesting accepted in a raw body
MAX_NESTING_DEPTH = 10000

# Characters escaped for safe embedding of JSON in HTML
_HTML_ESCAPES = {
    '&': '\\u0026',
    '<': '\\u003c',
    '>': '\\u003e',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
}
_HTML_ESCAPE_PATTERN = re.compile('[&<>\u2028\u2029]')

# Integral floats below this magnitude are written without a fraction
_PLAIN_FLOAT_LIMIT = 1e21

# Scanner states
_VALUE = 'value'
_FIRST_VALUE = 'first_value'
_KEY = 'key'
_FIRST_KEY = 'first_key'
_COLON = 'colon'
_NEXT = 'next'
_DONE = 'done'


def system_clock() -> datetime:
    """Current wall-clock time in the local zone"""
    return datetime.now().astimezone()


def utc_clock() -> datetime:
    """Current wall-clock time in UTC"""
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    Format a datetime as an X-TIMESTAMP value.

    Args:
        moment: Datetime to format; naive values are taken as local time

    Returns:
        str: ISO-8601 with milliseconds and a numeric offset,
            e.g. 2024-01-15T10:30:00.000+07:00
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        moment = moment.astimezone()
    return moment.isoformat(timespec='milliseconds')


def generate_timestamp(clock: Optional[Clock] = None) -> str:
    """
    Generate an X-TIMESTAMP value from a clock.

    Args:
        clock: Time source (uses the local system clock if None)

    Returns:
        str: Formatted timestamp
    """
    return format_timestamp((clock or system_clock)())


def _invalid_json(reason: str, offset: int) -> SerializationError:
    return SerializationError(
        f"Body is not valid JSON: {reason} at offset {offset}",
        details={"offset": offset}
    )


def _after_value(stack: List[str]) -> str:
    return _NEXT if stack else _DONE


def _match_scalar(text: str, pos: int) -> Optional[str]:
    char = text[pos]
    if char == '"':
        match = _JSON_STRING.match(text, pos)
    elif char == '-' or '0' <= char <= '9':
        match = _JSON_NUMBER.match(text, pos)
    else:
        return next((word for word in _JSON_LITERALS if text.startswith(word, pos)), None)
    return match.group() if match else None


def minify_json(data: bytes) -> bytes:
    """
    Remove insignificant whitespace from JSON text.

    Member order, number spelling and string escapes are kept exactly as
    written; only whitespace outside string literals is dropped. The input
    is validated by a single non-recursive pass, so nesting is limited only
    by MAX_NESTING_DEPTH.

    Args:
        data: UTF-8 JSON text

    Returns:
        bytes: Compact JSON text

    Raises:
        SerializationError: If the input is not valid JSON
    """
    # Undecodable bytes survive as lone surrogates and are written back unchanged
    text = data.decode('utf-8', 'surrogateescape')
    end = len(text)

    out = []
    stack = []
    state = _VALUE
    pos = 0

    while True:
        while pos < end and text[pos] in _JSON_WHITESPACE:
            pos += 1
        if pos >= end:
            break
        char = text[pos]

        if state == _DONE:
            raise _invalid_json("unexpected data after top-level value", pos)

        if state == _COLON:
            if char != ':':
                raise _invalid_json("expected ':' after object key", pos)
            out.append(char)
            pos += 1
            state = _VALUE
            continue

        if state == _NEXT:
            container = stack[-1]
            if char == ',':
                state = _KEY if container == '{' else _VALUE
            elif char == _JSON_CLOSERS[container]:
                stack.pop()
                state = _after_value(stack)
            else:
                raise _invalid_json("expected ',' or closing bracket", pos)
            out.append(char)
            pos += 1
            continue

        if (state == _FIRST_KEY and char == '}') or (state == _FIRST_VALUE and char == ']'):
            stack.pop()
            out.append(char)
            pos += 1
            state = _after_value(stack)
            continue

        if state in (_KEY, _FIRST_KEY):
            match = _JSON_STRING.match(text, pos)
            if match is None:
                raise _invalid_json("expected string object key", pos)
            out.append(match.group())
            pos = match.end()
            state = _COLON
            continue

        if char in _JSON_CLOSERS:
            if len(stack) >= MAX_NESTING_DEPTH:
                raise _invalid_json("exceeded max nesting depth", pos)
            stack.append(char)
            out.append(char)
            pos += 1
            state = _FIRST_KEY if char == '{' else _FIRST_VALUE
            continue

        token = _match_scalar(text, pos)
        if token is None:
            raise _invalid_json(f"invalid character {char!r}", pos)
        out.append(token)
        pos += len(token)
        state = _after_value(stack)

    if state != _DONE:
        raise _invalid_json("unexpected end of JSON input", end)

    return ''.join(out).encode('utf-8', 'surrogateescape')


def _plain_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < _PLAIN_FLOAT_LIMIT:
        return int(value)
    if isinstance(value, dict):
        return {key: _plain_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain_numbers(item) for item in value]
    return value


def serialize_json(value: Any) -> bytes:
    """
    Serialize a structured body to compact JSON.

    The output is the canonical encoding of a decoded JSON body: object keys
    are sorted, non-ASCII text is written as raw UTF-8, the characters & < >
    U+2028 and U+2029 are escaped as \\uXXXX, and integral floats are
    written without a fraction.

    Args:
        value: JSON-compatible value

    Returns:
        bytes: Compact UTF-8 JSON

    Raises:
        SerializationError: If the value cannot be represented as JSON
    """
    try:
        text = json.dumps(
            _plain_numbers(value),
            separators=(',', ':'),
            sort_keys=True,
            ensure_ascii=False,
            allow_nan=False
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(
            f"Body cannot be serialized to JSON: {e}",
            details={"body_type": type(value).__name__}
        ) from e

    text = _HTML_ESCAPE_PATTERN.sub(lambda match: _HTML_ESCAPES[match.group()], text)
    return to_utf8(text)
