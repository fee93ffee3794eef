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
"""Consolidation of a raw match event log into report-ready events."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Union

from matchreport.engine.builders import build_position_switch_event, build_substitution_event
from matchreport.engine.config import CONSOLIDATION_CONFIG, ConsolidationConfig
from matchreport.engine.grouping import group_events
from matchreport.engine.names import PlayerNameMap, build_player_name_map
from matchreport.engine.ordering import sort_events_by_ordinal
from matchreport.models.events import MatchEvent
from matchreport.utils.event_log import event_from_dict

if TYPE_CHECKING:
    from matchreport.utils.debug import ConsolidationDebugger


def coerce_events(events: Optional[Iterable[Union[MatchEvent, Mapping[str, Any]]]]) -> List[MatchEvent]:
    """Normalise mixed input records into :class:`MatchEvent` instances.

    Parameters
    ----------
    events : Iterable[MatchEvent | Mapping[str, Any]] | None
        Records as ``MatchEvent`` objects or plain decoded JSON mappings.

    Returns
    -------
    List[MatchEvent]
        The records in input order; ``None`` yields an empty list.
    """
    return [event if isinstance(event, MatchEvent) else event_from_dict(event) for event in events or []]


def consolidate_match_events(
    events: Optional[Iterable[Union[MatchEvent, Mapping[str, Any]]]] = None,
    player_name_map: Optional[PlayerNameMap] = None,
    *,
    config: Optional[ConsolidationConfig] = None,
    debugger: Optional["ConsolidationDebugger"] = None,
) -> List[MatchEvent]:
    """Merge correlated records and return the whole log in report order.

    Substitution in/out records sharing a correlation id collapse into one
    ``substitution`` event; position switch and goalie records sharing a
    correlation id collapse into one ``goalie_switch``, ``goalie_enters`` or
    ``position_switch_group`` event. Everything else passes through. The
    merged collection is then sorted in a single pass.

    Parameters
    ----------
    events : Iterable[MatchEvent | Mapping[str, Any]] | None
        Raw records in arrival order. They are never modified.
    player_name_map : PlayerNameMap | None
        Prebuilt name lookup; built from ``events`` when omitted.
    config : ConsolidationConfig | None
        Consolidation settings; defaults to :data:`CONSOLIDATION_CONFIG`.
    debugger : ConsolidationDebugger | None
        Optional logging helper used to trace consolidation decisions.

    Returns
    -------
    List[MatchEvent]
        Pass-through and composite events ordered by ordinal, creation time,
        match clock and input position.
    """
    records = coerce_events(events)
    if not records:
        return []

    cfg = config or CONSOLIDATION_CONFIG
    names = player_name_map if player_name_map is not None else build_player_name_map(records, cfg)
    grouping = group_events(records, names, config=cfg, debugger=debugger)

    merged: List[MatchEvent] = list(grouping.pass_through)

    for sub_group in grouping.substitution_groups.values():
        composite = build_substitution_event(sub_group, cfg)
        merged.append(composite)
        if debugger:
            debugger.log_composite(composite.event_type, sub_group.correlation_id, len(sub_group.source_indices))

    for pos_group in grouping.position_groups.values():
        composite = build_position_switch_event(pos_group, names, cfg)
        merged.append(composite)
        if debugger:
            debugger.log_composite(composite.event_type, pos_group.correlation_id, len(pos_group.source_indices))

    return sort_events_by_ordinal(merged)
