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
"""Translation from storage-level event types to report timeline types."""

from __future__ import annotations

from typing import Dict

EVENT_TYPE_MAPPING: Dict[str, str] = {
    "match_started": "match_start",
    "match_ended": "match_end",
    "period_started": "period_start",
    "period_ended": "period_end",
    "goal_scored": "goal_scored",
    "goal_conceded": "goal_conceded",
    "substitution_in": "substitution",
    "substitution_out": "substitution",
    "goalie_enters": "goalie_assignment",
    "goalie_exits": "goalie_switch",
    "goalie_switch": "goalie_switch",
    "position_switch": "position_change",
    "position_switch_group": "position_change",
    "player_inactivated": "player_inactivated",
    "player_activated": "player_activated",
    "player_reactivated": "player_activated",
    "fair_play_award": "fair_play_award",
}


def map_database_event_to_ui_type(db_event_type: str) -> str:
    """Translate a stored event type into the type shown on the timeline.

    Parameters
    ----------
    db_event_type : str
        Storage-level event type tag.

    Returns
    -------
    str
        The mapped type, or ``db_event_type`` itself when it has no entry.
    """
    return EVENT_TYPE_MAPPING.get(db_event_type) or db_event_type
