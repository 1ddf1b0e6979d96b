from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError

from blogviewer.core.schema import SessionRecordModel
from blogviewer.domain import SessionState, TabRecord


@dataclass(frozen=True, slots=True)
class ValidSession:
    state: SessionState


@dataclass(frozen=True, slots=True)
class InvalidSession:
    reason: str


SessionValidation = Union[ValidSession, InvalidSession]


def validate_session_record(raw: bytes | str | None) -> SessionValidation:
    """Structurally check a durable session record.

    Returns :class:`InvalidSession` for absent bytes, undecodable or non-JSON
    payloads, shape mismatches and duplicate tab ids. Never raises.
    """

    if raw is None:
        return InvalidSession("no stored session")
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return InvalidSession(f"not valid JSON: {exc}")

    if not isinstance(payload, dict):
        return InvalidSession("session record must be an object")
    try:
        record = SessionRecordModel.model_validate(payload)
    except ValidationError as exc:
        return InvalidSession(f"schema mismatch: {exc.error_count()} error(s)")

    tabs = tuple(TabRecord(id=tab.id, name=tab.name) for tab in record.tabs)
    if len({tab.id for tab in tabs}) != len(tabs):
        return InvalidSession("duplicate tab ids")
    return ValidSession(SessionState(tabs=tabs, active_tab_id=record.active_tab_id))
