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
"""Timeline entries shown on the match report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from matchreport.engine.consolidation import consolidate_match_events
from matchreport.engine.names import PlayerNameMap, lookup_name, primary_name
from matchreport.engine.ordering import as_number, parse_event_time
from matchreport.engine.type_mapping import map_database_event_to_ui_type
from matchreport.models.events import MatchEvent


@dataclass(slots=True)
class TimelineEntry:
    """Presentation record for one line of the match report.

    Parameters
    ----------
    id : Any
        Identifier of the underlying event.
    type : str
        Timeline type, translated from the stored event type.
    timestamp : float | None
        Creation time in epoch milliseconds.
    match_time : str | None
        Match clock formatted as ``M:SS``.
    period_number : Any
        Period the event belongs to.
    player_id : Any
        Player the event refers to.
    data : Dict[str, Any], optional
        Event payload with ``playerId`` and ``scorerId`` filled in.
    """

    id: Any
    type: str
    timestamp: Optional[float]
    match_time: Optional[str]
    period_number: Any
    player_id: Any
    data: Dict[str, Any] = field(default_factory=dict)


def format_match_time(seconds: Any) -> Optional[str]:
    """Format a match clock offset as ``M:SS``.

    Parameters
    ----------
    seconds : Any
        Offset in seconds since kick-off.

    Returns
    -------
    str | None
        The formatted clock, or ``None`` when ``seconds`` is not a number.
    """
    value = as_number(seconds)
    if value is None:
        return None
    total = max(0, int(value))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def to_timeline_entry(event: MatchEvent) -> TimelineEntry:
    """Translate a consolidated event into a timeline entry.

    Parameters
    ----------
    event : MatchEvent
        Event taken from :func:`consolidate_match_events`.

    Returns
    -------
    TimelineEntry
        The presentation record.
    """
    data = dict(event.data)
    data["playerId"] = event.player_id
    data["scorerId"] = event.player_id
    return TimelineEntry(
        id=event.id,
        type=map_database_event_to_ui_type(event.event_type),
        timestamp=parse_event_time(event),
        match_time=format_match_time(event.occurred_at_seconds),
        period_number=event.period,
        player_id=event.player_id,
        data=data,
    )


def build_timeline(
    events: Optional[Iterable[Union[MatchEvent, Mapping[str, Any]]]] = None,
    player_name_map: Optional[PlayerNameMap] = None,
) -> List[TimelineEntry]:
    """Consolidate a raw event log and translate it into timeline entries.

    Parameters
    ----------
    events : Iterable[MatchEvent | Mapping[str, Any]] | None
        Raw records in arrival order.
    player_name_map : PlayerNameMap | None
        Prebuilt name lookup passed through to consolidation.

    Returns
    -------
    List[TimelineEntry]
        Entries in report order.
    """
    return [to_timeline_entry(event) for event in consolidate_match_events(events, player_name_map)]


def _names(ids: Any, names: Any, lookup: PlayerNameMap) -> str:
    """Join player names for a summary, falling back to ids.

    Parameters
    ----------
    ids : Any
        List of player ids.
    names : Any
        Parallel list of names, possibly shorter than ``ids``.
    lookup : PlayerNameMap
        Additional name lookup.

    Returns
    -------
    str
        Comma separated names, or ``"-"`` when there are none.
    """
    ids = ids if isinstance(ids, list) else []
    names = names if isinstance(names, list) else []
    labels = []
    for index, player_id in enumerate(ids):
        label = names[index] if index < len(names) and len(names) == len(ids) else lookup_name(lookup, player_id)
        labels.append(str(label or player_id))
    return ", ".join(labels) or "-"


def describe_event(event: MatchEvent, player_name_map: Optional[PlayerNameMap] = None) -> str:
    """Return a one-line human-readable summary of ``event``.

    Parameters
    ----------
    event : MatchEvent
        Consolidated event.
    player_name_map : PlayerNameMap | None
        Lookup used when the payload does not name the players involved.

    Returns
    -------
    str
        Short description suitable for a text report.
    """
    lookup = player_name_map or {}
    data = event.data
    player = primary_name(data) or lookup_name(lookup, event.player_id) or event.player_id

    if event.event_type == "substitution":
        off = _names(data.get("playersOff"), data.get("playersOffNames"), lookup)
        on = _names(data.get("playersOn"), data.get("playersOnNames"), lookup)
        return f"Off: {off} | On: {on}"
    if event.event_type == "goalie_switch":
        old = data.get("oldGoalieName") or data.get("oldGoalieId") or "-"
        new = data.get("newGoalieName") or data.get("newGoalieId") or "-"
        return f"Goalie {old} -> {new}"
    if event.event_type == "goalie_enters":
        return f"Goalie: {data.get('goalieName') or data.get('goalieId') or '-'}"
    if event.event_type == "position_switch_group":
        moves = [
            f"{change.get('playerName') or change.get('playerId')} "
            f"{change.get('oldPosition') or '?'} -> {change.get('newPosition') or '?'}"
            for change in data.get("positionChanges", [])
        ]
        return "; ".join(moves) or "Position change"
    if event.event_type in ("goal_scored", "goal_conceded"):
        own, opponent = data.get("ownScore"), data.get("opponentScore")
        score = f" ({own}-{opponent})" if own is not None and opponent is not None else ""
        return f"{player or 'Goal'}{score}"
    return str(player) if player else ""
