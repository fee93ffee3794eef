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
"""Event domain models for recorded match event logs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class MatchEvent:
    """Single entry of a match event log, raw or consolidated.

    Raw records and the composite events synthesised from them share this
    shape so downstream consumers cannot tell them apart.

    Parameters
    ----------
    event_type : str
        Storage-level category of the event (for example ``"substitution_in"``).
    player_id : Any, optional
        Identifier of the player the event refers to.
    correlation_id : str | None, optional
        Key shared by records that describe one logical action.
    created_at : str | None, optional
        ISO-8601 timestamp assigned when the record was written.
    occurred_at_seconds : float | None, optional
        In-match clock offset in seconds.
    ordinal : int | None, optional
        Monotonic sequence number assigned at write time.
    period : Any, optional
        Period the event belongs to.
    data : Dict[str, Any], optional
        Free-form payload whose keys depend on ``event_type``.
    id : Any, optional
        Record identifier; composite events use ``sub-``/``pos-`` prefixed ids.
    source_index : int | None, optional
        Position in the original input, used as the final ordering tie-break.
    extra : Dict[str, Any], optional
        Any further fields carried by the source record, kept for round-trips.
    """

    event_type: str
    player_id: Any = None
    correlation_id: Optional[str] = None
    created_at: Optional[str] = None
    occurred_at_seconds: Optional[float] = None
    ordinal: Optional[int] = None
    period: Any = None
    data: Dict[str, Any] = field(default_factory=dict)
    id: Any = None
    source_index: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)
