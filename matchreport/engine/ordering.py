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
"""Total ordering over raw and consolidated match events.

Events are compared through a prioritised chain of keys: the write-time
``ordinal``, the parsed ``created_at`` timestamp, the in-match clock
(``occurred_at_seconds``) and finally the position of the record in the
original input. The first key on which the two events differ decides. When
only one of the two events carries a key, that event sorts first, so records
with ordering information are never ranked level with records that lack it.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, Iterable, List, Optional

from matchreport.models.events import MatchEvent


def as_number(value: Any) -> Optional[float]:
    """Return ``value`` when it is a real, finite number, otherwise ``None``.

    Parameters
    ----------
    value : Any
        Candidate ordinal or clock value.

    Returns
    -------
    float | None
        The numeric value, or ``None`` for booleans, strings, NaN and missing values.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


_ISO_TIMESTAMP = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<time>\d{2}:\d{2}(?::\d{2})?)"
    r"(?:\.(?P<fraction>\d+))?(?P<offset>Z|[+-]\d{2}(?::?\d{2})?)?$",
    re.IGNORECASE,
)


def _normalise_timestamp(text: str) -> str:
    """Rewrite ``text`` into the subset of ISO-8601 ``datetime.fromisoformat`` reads.

    Fractional seconds are padded or cut to six digits, ``Z`` becomes
    ``+00:00`` and ``+HH``/``+HHMM`` offsets gain their minutes and colon.

    Parameters
    ----------
    text : str
        Stripped timestamp text.

    Returns
    -------
    str
        The rewritten text, or ``text`` unchanged when it is not a date-time.
    """
    match = _ISO_TIMESTAMP.match(text)
    if match is None:
        return text
    result = f"{match['date']}T{match['time']}"
    if match["fraction"]:
        result += "." + match["fraction"][:6].ljust(6, "0")
    offset = match["offset"]
    if offset:
        if offset.upper() == "Z":
            offset = "+00:00"
        else:
            digits = offset[1:].replace(":", "")
            offset = f"{offset[0]}{digits[:2]}:{digits[2:] or '00'}"
        result += offset
    return result


def parse_timestamp(value: Any) -> Optional[float]:
    """Parse an ISO-8601 timestamp into epoch milliseconds.

    Parameters
    ----------
    value : Any
        Raw ``created_at`` value. A trailing ``Z``, hour-only offsets and
        fractional seconds of any length are accepted; naive timestamps are
        read as UTC.

    Returns
    -------
    float | None
        Milliseconds since the epoch, or ``None`` when ``value`` is missing
        or does not parse.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(_normalise_timestamp(value.strip()))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000.0


def parse_event_time(event: MatchEvent) -> Optional[float]:
    """Return the parsed ``created_at`` of ``event`` in epoch milliseconds.

    Parameters
    ----------
    event : MatchEvent
        Event whose creation timestamp should be read.

    Returns
    -------
    float | None
        Milliseconds since the epoch, or ``None`` when absent or unparseable.
    """
    return parse_timestamp(event.created_at)


def _compare_optional(a: Optional[float], b: Optional[float]) -> int:
    """Compare two optional keys, ranking present values ahead of absent ones.

    Parameters
    ----------
    a : float | None
        Key of the left-hand event.
    b : float | None
        Key of the right-hand event.

    Returns
    -------
    int
        Negative, zero or positive; zero when both are absent or equal.
    """
    if a is not None and b is not None:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    if a is not None:
        return -1
    if b is not None:
        return 1
    return 0


def compare_events(a: MatchEvent, b: MatchEvent) -> int:
    """Compare two events for chronological rendering.

    Parameters
    ----------
    a : MatchEvent
        Left-hand event.
    b : MatchEvent
        Right-hand event.

    Returns
    -------
    int
        Negative when ``a`` sorts first, positive when ``b`` does, zero when
        no key separates them.
    """
    result = _compare_optional(as_number(a.ordinal), as_number(b.ordinal))
    if result:
        return result

    result = _compare_optional(parse_event_time(a), parse_event_time(b))
    if result:
        return result

    result = _compare_optional(as_number(a.occurred_at_seconds), as_number(b.occurred_at_seconds))
    if result:
        return result

    idx_a = a.source_index if isinstance(a.source_index, int) else math.inf
    idx_b = b.source_index if isinstance(b.source_index, int) else math.inf
    if idx_a < idx_b:
        return -1
    if idx_a > idx_b:
        return 1
    return 0


def sort_events_by_ordinal(events: Optional[Iterable[MatchEvent]] = None) -> List[MatchEvent]:
    """Return a new list holding ``events`` in report order.

    Parameters
    ----------
    events : Iterable[MatchEvent] | None
        Events to order; the input is left untouched.

    Returns
    -------
    List[MatchEvent]
        Events sorted with :func:`compare_events` using a stable sort.
    """
    return sorted(events or [], key=cmp_to_key(compare_events))
