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
"""Central configuration for event consolidation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple


@dataclass(slots=True)
class EventTypeConfig:
    """Storage-level event type tags recognised by the correlation grouper.

    Parameters
    ----------
    substitution_in : str, default="substitution_in"
        Tag written for a player entering the pitch.
    substitution_out : str, default="substitution_out"
        Tag written for a player leaving the pitch.
    position_switch : str, default="position_switch"
        Tag written when an on-field player changes position.
    goalie_enters : str, default="goalie_enters"
        Tag written when a player takes over in goal.
    goalie_exits : str, default="goalie_exits"
        Tag written when the goalkeeper leaves the goal.
    substitution : str, default="substitution"
        Type emitted for a consolidated substitution.
    goalie_switch : str, default="goalie_switch"
        Type emitted when a position group changes the goalkeeper.
    position_switch_group : str, default="position_switch_group"
        Type emitted for a position group without goalkeeper involvement.
    """

    substitution_in: str = "substitution_in"
    substitution_out: str = "substitution_out"
    position_switch: str = "position_switch"
    goalie_enters: str = "goalie_enters"
    goalie_exits: str = "goalie_exits"
    substitution: str = "substitution"
    goalie_switch: str = "goalie_switch"
    position_switch_group: str = "position_switch_group"

    @property
    def substitution_types(self) -> FrozenSet[str]:
        """Return the tags merged into substitution groups."""
        return frozenset({self.substitution_in, self.substitution_out})

    @property
    def position_types(self) -> FrozenSet[str]:
        """Return the tags merged into position/goalie groups."""
        return frozenset({self.position_switch, self.goalie_enters, self.goalie_exits})


@dataclass(slots=True)
class ConsolidationConfig:
    """Top-level container for consolidation settings.

    Parameters
    ----------
    types : EventTypeConfig, default=EventTypeConfig()
        Event type vocabulary.
    name_fields : Tuple[str, ...], default=("display_name", "playerName", "scorerName", "goalieName", "previousGoalieName")
        Payload keys searched, in order, for an event's primary player name.
    goalie_position : str, default="goalie"
        Position label (compared case-insensitively) that marks the goalkeeper.
    substitution_id_prefix : str, default="sub-"
        Prefix prepended to the correlation id of substitution composites.
    position_id_prefix : str, default="pos-"
        Prefix prepended to the correlation id of position/goalie composites.
    default_position_clock : float, default=0
        ``occurred_at_seconds`` reported by a position/goalie composite whose
        members carried no match clock.
    """

    types: EventTypeConfig = field(default_factory=EventTypeConfig)
    name_fields: Tuple[str, ...] = (
        "display_name",
        "playerName",
        "scorerName",
        "goalieName",
        "previousGoalieName",
    )
    goalie_position: str = "goalie"
    substitution_id_prefix: str = "sub-"
    position_id_prefix: str = "pos-"
    default_position_clock: float = 0


CONSOLIDATION_CONFIG = ConsolidationConfig()
"""Singleton-style access to the default consolidation configuration."""
