"""Index mappings for the events and metrics indices.

Typing convention: identifiers are ``keyword``, free text is ``text`` with a
``keyword`` sub-field, numerics carry a ``keyword`` sub-field, timestamps
are ``date`` and map-valued fields are untyped ``object``.
"""

from __future__ import annotations

from typing import Any


def _text_with_keyword() -> dict[str, Any]:
    return {"type": "text", "fields": {"keyword": {"type": "keyword"}}}


def _numeric_with_keyword(kind: str) -> dict[str, Any]:
    return {"type": kind, "fields": {"keyword": {"type": "keyword"}}}


_KEYWORD: dict[str, Any] = {"type": "keyword"}
_DATE: dict[str, Any] = {"type": "date"}
_OBJECT: dict[str, Any] = {"type": "object"}

EVENTS_MAPPING: dict[str, Any] = {
    "properties": {
        "apiVersion": _KEYWORD,
        "kind": _KEYWORD,
        "metadata": {
            "properties": {
                "name": _KEYWORD,
                "labels": _OBJECT,
                "deletionTimestamp": _DATE,
                "reason": _text_with_keyword(),
                "message": _text_with_keyword(),
            }
        },
        "involvedObject": {
            "properties": {
                "kind": _KEYWORD,
                "name": _KEYWORD,
                "uuid": _KEYWORD,
            }
        },
        "action": _KEYWORD,
        "eventTime": _DATE,
        "count": _numeric_with_keyword("integer"),
        "type": _KEYWORD,
        "currentStatus": _KEYWORD,
        "correlationId": _KEYWORD,
        "userId": _KEYWORD,
        "orgUuId": _KEYWORD,
    }
}

METRICS_MAPPING: dict[str, Any] = {
    "properties": {
        "@timestamp": _DATE,
        "metric_name": _KEYWORD,
        "duration": _numeric_with_keyword("float"),
        "event_name": _KEYWORD,
        "event_type": _KEYWORD,
        "object_kind": _KEYWORD,
        "status": _KEYWORD,
        "labels": _OBJECT,
        "error_rate": _numeric_with_keyword("integer"),
        "is_warning": {"type": "boolean"},
        "type": _KEYWORD,
        "event_count": _numeric_with_keyword("integer"),
        "event": _OBJECT,
    }
}
