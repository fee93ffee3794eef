# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Utilities for reading match event logs from serialized data sources.

The helpers in this module translate plain dictionaries or JSON payloads, as
exported from the match events endpoint, into :class:`MatchEvent` objects and
back again. Missing fields fall back to ``None`` and unknown fields are kept
aside in ``extra`` so that a record which passes through consolidation
serializes exactly as it was read.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping

from matchreport.models.events import MatchEvent

_STANDARD_KEYS = (
    "event_type",
    "player_id",
    "correlation_id",
    "created_at",
    "occurred_at_seconds",
    "ordinal",
    "period",
    "data",
    "id",
)
_SOURCE_INDEX_KEY = "__sourceIndex"


def event_from_dict(d: Mapping[str, Any]) -> MatchEvent:
    """Build a ``MatchEvent`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping containing a serialized event record. Supported keys are
        ``event_type``, ``player_id``, ``correlation_id``, ``created_at``,
        ``occurred_at_seconds``, ``ordinal``, ``period``, ``data`` and ``id``;
        anything else is preserved in ``extra``.

    Returns
    -------
    MatchEvent
        The event record. A missing ``event_type`` becomes ``"unknown"`` and a
        missing or malformed ``data`` payload becomes an empty mapping.

    """
    data = d.get("data")
    source_index = d.get(_SOURCE_INDEX_KEY)
    extra = {k: v for k, v in d.items() if k not in _STANDARD_KEYS and k != _SOURCE_INDEX_KEY}
    return MatchEvent(
        event_type=d.get("event_type") or "unknown",
        player_id=d.get("player_id"),
        correlation_id=d.get("correlation_id"),
        created_at=d.get("created_at"),
        occurred_at_seconds=d.get("occurred_at_seconds"),
        ordinal=d.get("ordinal"),
        period=d.get("period"),
        data=dict(data) if isinstance(data, Mapping) else {},
        id=d.get("id"),
        source_index=source_index if isinstance(source_index, int) else None,
        extra=extra,
    )


def event_to_dict(event: MatchEvent, include_source_index: bool = False) -> Dict[str, Any]:
    """Serialize a ``MatchEvent`` back into a plain dictionary.

    Parameters
    ----------
    event
        The event to serialize.
    include_source_index
        When ``True`` the ordering tie-break is written as ``__sourceIndex``.

    Returns
    -------
    Dict[str, Any]
        JSON-compatible mapping; ``id`` is only present when the event has one.

    """
    out: Dict[str, Any] = dict(event.extra)
    if event.id is not None:
        out["id"] = event.id
    out.update(
        {
            "event_type": event.event_type,
            "player_id": event.player_id,
            "correlation_id": event.correlation_id,
            "created_at": event.created_at,
            "occurred_at_seconds": event.occurred_at_seconds,
            "ordinal": event.ordinal,
            "period": event.period,
            "data": dict(event.data),
        }
    )
    if include_source_index:
        out[_SOURCE_INDEX_KEY] = event.source_index
    return out


def load_events_from_json(path: str) -> List[MatchEvent]:
    """Load a match event log from a JSON document.

    Parameters
    ----------
    path
        The filesystem path to a JSON document holding either a list of event
        records or an object with an ``events`` list.

    Returns
    -------
    List[MatchEvent]
        The records in document order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    ValueError
        Raised when the document is not valid JSON or has neither supported shape.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Event log JSON not found: {path}")

    with p.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)

    if isinstance(payload, Mapping):
        payload = payload.get("events")
    if not isinstance(payload, list):
        raise ValueError(f"Event log {path} must be a list of events or an object with an 'events' list")

    events = []
    for index, record in enumerate(payload):
        if not isinstance(record, Mapping):
            raise ValueError(f"Event #{index} in {path} is not an object")
        events.append(event_from_dict(record))
    return events
