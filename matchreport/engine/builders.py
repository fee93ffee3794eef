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
"""Builders that turn finished correlation groups into composite events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from matchreport.engine.config import CONSOLIDATION_CONFIG, ConsolidationConfig
from matchreport.engine.grouping import PositionSwitchGroup, SubstitutionGroup
from matchreport.engine.names import PlayerNameMap, lookup_name, primary_name
from matchreport.models.events import MatchEvent


@dataclass(frozen=True, slots=True)
class PositionChange:
    """One player's move recorded inside a position/goalie group.

    Parameters
    ----------
    player_id : Any
        Identifier of the player who moved.
    player_name : str | None
        Display name of the player, when known.
    old_position : str | None
        Position the player left.
    new_position : str | None
        Position the player took up.
    """

    player_id: Any
    player_name: Optional[str]
    old_position: Optional[str]
    new_position: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        """Return the payload form used inside ``positionChanges``.

        Returns
        -------
        Dict[str, Any]
            Mapping with ``playerId``, ``playerName``, ``oldPosition`` and ``newPosition``.
        """
        return {
            "playerId": self.player_id,
            "playerName": self.player_name,
            "oldPosition": self.old_position,
            "newPosition": self.new_position,
        }


def build_substitution_event(group: SubstitutionGroup, config: Optional[ConsolidationConfig] = None) -> MatchEvent:
    """Merge a substitution group into one ``substitution`` event.

    Parameters
    ----------
    group : SubstitutionGroup
        Finished group; either side may be empty.
    config : ConsolidationConfig | None
        Supplies the emitted type and id prefix.

    Returns
    -------
    MatchEvent
        Composite event whose payload lists the players off and on.
    """
    cfg = config or CONSOLIDATION_CONFIG
    data = dict(group.data)
    data["playersOff"] = list(group.players_off)
    data["playersOn"] = list(group.players_on)
    if group.players_off_names:
        data["playersOffNames"] = list(group.players_off_names)
    if group.players_on_names:
        data["playersOnNames"] = list(group.players_on_names)

    return MatchEvent(
        event_type=cfg.types.substitution,
        id=f"{cfg.substitution_id_prefix}{group.correlation_id}",
        correlation_id=group.correlation_id,
        created_at=group.created_at,
        occurred_at_seconds=group.occurred_at_seconds,
        ordinal=group.ordinal,
        period=group.period,
        data=data,
        source_index=group.source_index,
    )


def build_position_changes(
    events: List[MatchEvent],
    player_name_map: Optional[PlayerNameMap] = None,
    config: Optional[ConsolidationConfig] = None,
) -> List[PositionChange]:
    """Extract a :class:`PositionChange` from every ``position_switch`` member.

    Parameters
    ----------
    events : List[MatchEvent]
        Member records of a position/goalie group in arrival order.
    player_name_map : PlayerNameMap | None
        Fallback lookup for players whose payload carries no name.
    config : ConsolidationConfig | None
        Supplies the position switch tag and name fields.

    Returns
    -------
    List[PositionChange]
        One record per position switch, in arrival order.
    """
    cfg = config or CONSOLIDATION_CONFIG
    names = player_name_map or {}
    changes: List[PositionChange] = []
    for event in events:
        if event.event_type != cfg.types.position_switch:
            continue
        data = event.data or {}
        changes.append(
            PositionChange(
                player_id=event.player_id,
                player_name=primary_name(data, cfg) or lookup_name(names, event.player_id),
                old_position=data.get("old_position") or data.get("oldPosition") or None,
                new_position=data.get("new_position") or data.get("newPosition") or None,
            )
        )
    return changes


def _is_position(value: Optional[str], position: str) -> bool:
    """Return ``True`` when ``value`` names ``position`` ignoring case.

    Parameters
    ----------
    value : str | None
        Position label taken from a change record.
    position : str
        Reference label.

    Returns
    -------
    bool
        Whether the labels match.
    """
    return isinstance(value, str) and value.lower() == position.lower()


def build_position_switch_event(
    group: PositionSwitchGroup,
    player_name_map: Optional[PlayerNameMap] = None,
    config: Optional[ConsolidationConfig] = None,
) -> MatchEvent:
    """Merge a position/goalie group into one composite event.

    The group becomes a ``goalie_switch`` when the goalkeeper changes (a
    goalie exit record or a change from or to the goalie position), a plain
    ``goalie_enters`` when it holds nothing but a goalie entry, and a
    ``position_switch_group`` otherwise.

    Parameters
    ----------
    group : PositionSwitchGroup
        Finished group.
    player_name_map : PlayerNameMap | None
        Fallback lookup for goalkeeper and player names.
    config : ConsolidationConfig | None
        Supplies type tags, the goalie label and the id prefix.

    Returns
    -------
    MatchEvent
        The composite event.
    """
    cfg = config or CONSOLIDATION_CONFIG
    types = cfg.types
    names = player_name_map or {}
    goalie = cfg.goalie_position

    changes = build_position_changes(group.events, names, cfg)
    enter_event = next((ev for ev in reversed(group.events) if ev.event_type == types.goalie_enters), None)
    exit_event = next((ev for ev in reversed(group.events) if ev.event_type == types.goalie_exits), None)

    from_goalie = next((c for c in changes if _is_position(c.old_position, goalie)), None)
    to_goalie = next((c for c in changes if _is_position(c.new_position, goalie)), None)
    goalie_changed = exit_event is not None or from_goalie is not None or to_goalie is not None

    new_goalie_id = (enter_event.player_id if enter_event else None) or (to_goalie.player_id if to_goalie else None)
    old_goalie_id = (exit_event.player_id if exit_event else None) or (from_goalie.player_id if from_goalie else None)

    new_goalie_name = (
        (primary_name(enter_event.data, cfg) if enter_event else None)
        or (to_goalie.player_name if to_goalie else None)
        or lookup_name(names, new_goalie_id)
    )
    old_goalie_name = (
        (primary_name(exit_event.data, cfg) if exit_event else None)
        or (from_goalie.player_name if from_goalie else None)
        or lookup_name(names, old_goalie_id)
    )

    occurred = group.occurred_at_seconds
    if occurred is None:
        occurred = cfg.default_position_clock

    common: Dict[str, Any] = {
        "id": f"{cfg.position_id_prefix}{group.correlation_id}",
        "correlation_id": group.correlation_id,
        "created_at": group.created_at,
        "occurred_at_seconds": occurred,
        "ordinal": group.ordinal,
        "period": group.period,
        "source_index": group.source_index,
    }

    if enter_event is not None and not goalie_changed and not changes:
        data = dict(enter_event.data or {})
        data["goalieId"] = new_goalie_id
        data["goalieName"] = new_goalie_name
        return MatchEvent(event_type=types.goalie_enters, data=data, **common)

    data = {"positionChanges": [change.to_dict() for change in changes]}
    derived = {
        "oldGoalieId": old_goalie_id,
        "newGoalieId": new_goalie_id,
        "oldGoalieName": old_goalie_name,
        "newGoalieName": new_goalie_name,
        "oldGoalieNewPosition": from_goalie.new_position if from_goalie else None,
        "newGoaliePreviousPosition": to_goalie.old_position if to_goalie else None,
    }
    data.update({key: value for key, value in derived.items() if value})

    event_type = types.goalie_switch if goalie_changed else types.position_switch_group
    return MatchEvent(event_type=event_type, data=data, **common)
