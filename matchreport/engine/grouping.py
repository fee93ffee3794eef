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
"""Correlation grouping of raw event records.

A single logical action in the match log (one substitution, one keeper
change) is usually written as several records that share a correlation id.
The grouper walks the log once and sorts every record into one of three
buckets: a substitution group, a position/goalie group, or the pass-through
list for records that are emitted unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from matchreport.engine.config import CONSOLIDATION_CONFIG, ConsolidationConfig
from matchreport.engine.names import PlayerNameMap, is_hashable_id, lookup_name, primary_name
from matchreport.engine.ordering import as_number, parse_timestamp
from matchreport.models.events import MatchEvent

if TYPE_CHECKING:
    from matchreport.utils.debug import ConsolidationDebugger


@dataclass(slots=True)
class _GroupTiming:
    """Earliest-known timing shared by both group variants.

    Parameters
    ----------
    correlation_id : str
        Key shared by every member of the group.
    created_at : str | None, optional
        Earliest parseable creation timestamp seen so far.
    occurred_at_seconds : float | None, optional
        Smallest match clock value seen so far.
    ordinal : int | None, optional
        Smallest ordinal seen so far.
    period : Any, optional
        First non-null period seen.
    source_indices : List[int], optional
        Input positions of the member records.
    """

    correlation_id: str
    created_at: Optional[str] = None
    occurred_at_seconds: Optional[float] = None
    ordinal: Optional[int] = None
    period: Any = None
    source_indices: List[int] = field(default_factory=list)

    @property
    def source_index(self) -> Optional[int]:
        """Return the earliest input position among the members."""
        return min(self.source_indices) if self.source_indices else None

    def absorb_timing(self, event: MatchEvent, index: int) -> None:
        """Fold the timing fields of a new member into the group.

        Parameters
        ----------
        event : MatchEvent
            Member record being added.
        index : int
            Input position of ``event``.
        """
        self.source_indices.append(index)

        event_time = parse_timestamp(event.created_at)
        if event_time is not None:
            group_time = parse_timestamp(self.created_at)
            if group_time is None or event_time < group_time:
                self.created_at = event.created_at
        elif self.created_at is None and event.created_at is not None:
            self.created_at = event.created_at

        occurred = as_number(event.occurred_at_seconds)
        if occurred is not None:
            current = as_number(self.occurred_at_seconds)
            if current is None or occurred < current:
                self.occurred_at_seconds = occurred

        ordinal = as_number(event.ordinal)
        if ordinal is not None:
            current = as_number(self.ordinal)
            if current is None or ordinal < current:
                self.ordinal = ordinal

        if self.period is None and event.period is not None:
            self.period = event.period


@dataclass(slots=True)
class SubstitutionGroup(_GroupTiming):
    """Accumulator for the in/out records of one substitution.

    Parameters
    ----------
    correlation_id : str
        Key shared by every member of the group.
    created_at : str | None, optional
        Earliest parseable creation timestamp seen so far.
    occurred_at_seconds : float | None, optional
        Smallest match clock value seen so far.
    ordinal : int | None, optional
        Smallest ordinal seen so far.
    period : Any, optional
        First non-null period seen.
    source_indices : List[int], optional
        Input positions of the member records.
    data : Dict[str, Any], optional
        Payload of the first member, used as the composite's base payload.
    players_on : List[Any], optional
        Entering player ids in arrival order, without duplicates.
    players_off : List[Any], optional
        Leaving player ids in arrival order, without duplicates.
    players_on_names : List[str], optional
        Names resolved for newly added entering players.
    players_off_names : List[str], optional
        Names resolved for newly added leaving players.
    """

    data: Dict[str, Any] = field(default_factory=dict)
    players_on: List[Any] = field(default_factory=list)
    players_off: List[Any] = field(default_factory=list)
    players_on_names: List[str] = field(default_factory=list)
    players_off_names: List[str] = field(default_factory=list)

    def add_player(self, player_id: Any, name: Optional[str], entering: bool) -> None:
        """Record a player on the entering or leaving side once.

        Parameters
        ----------
        player_id : Any
            Identifier of the player; falsy ids are ignored.
        name : str | None
            Resolved display name, appended only when the id is new.
        entering : bool
            ``True`` for the entering side, ``False`` for the leaving side.
        """
        ids = self.players_on if entering else self.players_off
        names = self.players_on_names if entering else self.players_off_names
        if not player_id or player_id in ids:
            return
        ids.append(player_id)
        if name:
            names.append(name)


@dataclass(slots=True)
class PositionSwitchGroup(_GroupTiming):
    """Accumulator for the position and goalie records of one change.

    Parameters
    ----------
    correlation_id : str
        Key shared by every member of the group.
    created_at : str | None, optional
        Earliest parseable creation timestamp seen so far.
    occurred_at_seconds : float | None, optional
        Smallest match clock value seen so far.
    ordinal : int | None, optional
        Smallest ordinal seen so far.
    period : Any, optional
        First non-null period seen.
    source_indices : List[int], optional
        Input positions of the member records.
    events : List[MatchEvent], optional
        Member records in arrival order.
    """

    events: List[MatchEvent] = field(default_factory=list)


@dataclass(slots=True)
class GroupingResult:
    """Outcome of a single grouping pass.

    Parameters
    ----------
    pass_through : List[MatchEvent]
        Records emitted unchanged, tagged with their input position.
    substitution_groups : Dict[str, SubstitutionGroup]
        Substitution groups keyed by correlation id, in creation order.
    position_groups : Dict[str, PositionSwitchGroup]
        Position/goalie groups keyed by correlation id, in creation order.
    """

    pass_through: List[MatchEvent] = field(default_factory=list)
    substitution_groups: Dict[str, SubstitutionGroup] = field(default_factory=dict)
    position_groups: Dict[str, PositionSwitchGroup] = field(default_factory=dict)


def group_events(
    events: Iterable[MatchEvent],
    player_name_map: Optional[PlayerNameMap] = None,
    *,
    config: Optional[ConsolidationConfig] = None,
    debugger: Optional["ConsolidationDebugger"] = None,
) -> GroupingResult:
    """Partition raw records into pass-through events and correlation groups.

    Parameters
    ----------
    events : Iterable[MatchEvent]
        Raw records in arrival order.
    player_name_map : PlayerNameMap | None
        Lookup used when a substitution record carries no name of its own.
    config : ConsolidationConfig | None
        Event type vocabulary and name fields; defaults to :data:`CONSOLIDATION_CONFIG`.
    debugger : ConsolidationDebugger | None
        Optional logging helper used to trace grouping decisions.

    Returns
    -------
    GroupingResult
        Pass-through events plus the substitution and position/goalie groups.
    """
    cfg = config or CONSOLIDATION_CONFIG
    types = cfg.types
    names = player_name_map or {}
    result = GroupingResult()

    for index, event in enumerate(events):
        correlation_id = event.correlation_id

        if debugger and event.created_at is not None and parse_timestamp(event.created_at) is None:
            debugger.log_unparseable_timestamp(index, event.created_at)
        if debugger and event.player_id and not is_hashable_id(event.player_id):
            debugger.log_error("player_id", f"Source #{index}: player id {event.player_id!r} cannot be looked up")
        if correlation_id and not is_hashable_id(correlation_id):
            if debugger:
                debugger.log_error(
                    "correlation_id", f"Source #{index}: correlation id {correlation_id!r} cannot group records"
                )
            correlation_id = None

        if correlation_id and event.event_type in types.substitution_types:
            sub_group = result.substitution_groups.get(correlation_id)
            if sub_group is None:
                sub_group = SubstitutionGroup(
                    correlation_id=correlation_id,
                    created_at=event.created_at,
                    occurred_at_seconds=as_number(event.occurred_at_seconds),
                    ordinal=as_number(event.ordinal),
                    period=event.period,
                    data=dict(event.data or {}),
                )
                result.substitution_groups[correlation_id] = sub_group
                if debugger:
                    debugger.log_group_opened("substitution", correlation_id, index)

            sub_group.absorb_timing(event, index)
            name = primary_name(event.data, cfg) or lookup_name(names, event.player_id)
            sub_group.add_player(event.player_id, name, entering=event.event_type == types.substitution_in)
            continue

        if correlation_id and event.event_type in types.position_types:
            pos_group = result.position_groups.get(correlation_id)
            if pos_group is None:
                pos_group = PositionSwitchGroup(
                    correlation_id=correlation_id,
                    created_at=event.created_at,
                    occurred_at_seconds=as_number(event.occurred_at_seconds),
                    ordinal=as_number(event.ordinal),
                    period=event.period,
                )
                result.position_groups[correlation_id] = pos_group
                if debugger:
                    debugger.log_group_opened("position", correlation_id, index)

            pos_group.absorb_timing(event, index)
            pos_group.events.append(event)
            continue

        result.pass_through.append(replace(event, data=dict(event.data or {}), source_index=index))
        if debugger:
            debugger.log_pass_through(index, event.event_type, correlation_id)

    return result
