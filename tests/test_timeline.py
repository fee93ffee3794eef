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
"""Tests for the type mapping table and timeline entries."""

from __future__ import annotations

import pytest

from matchreport.engine.type_mapping import EVENT_TYPE_MAPPING, map_database_event_to_ui_type
from matchreport.models.events import MatchEvent
from matchreport.report.timeline import build_timeline, describe_event, format_match_time, to_timeline_entry


class TestTypeMapping:
    """Tests for the storage to timeline type table."""

    @pytest.mark.parametrize(
        "db_type, ui_type",
        [
            ("match_started", "match_start"),
            ("substitution_in", "substitution"),
            ("substitution_out", "substitution"),
            ("goalie_enters", "goalie_assignment"),
            ("goalie_exits", "goalie_switch"),
            ("goalie_switch", "goalie_switch"),
            ("position_switch", "position_change"),
            ("position_switch_group", "position_change"),
            ("player_reactivated", "player_activated"),
            ("player_activated", "player_activated"),
        ],
    )
    def test_known_types(self, db_type: str, ui_type: str) -> None:
        assert map_database_event_to_ui_type(db_type) == ui_type

    def test_unknown_type_is_identity(self) -> None:
        assert map_database_event_to_ui_type("weather_delay") == "weather_delay"

    def test_substitution_composite_maps_to_itself(self) -> None:
        assert "substitution" not in EVENT_TYPE_MAPPING
        assert map_database_event_to_ui_type("substitution") == "substitution"


class TestTimeline:
    """Tests for timeline entry construction."""

    @pytest.mark.parametrize("seconds, expected", [(0, "0:00"), (65, "1:05"), (600.9, "10:00"), (None, None)])
    def test_format_match_time(self, seconds, expected) -> None:
        assert format_match_time(seconds) == expected

    def test_to_timeline_entry(self) -> None:
        event = MatchEvent(
            event_type="goal_scored",
            id=17,
            player_id="p1",
            created_at="1970-01-01T00:00:02Z",
            occurred_at_seconds=125,
            period=2,
            data={"ownScore": 2, "opponentScore": 1},
        )
        entry = to_timeline_entry(event)
        assert entry.id == 17
        assert entry.type == "goal_scored"
        assert entry.timestamp == pytest.approx(2000.0)
        assert entry.match_time == "2:05"
        assert entry.period_number == 2
        assert entry.data == {"ownScore": 2, "opponentScore": 1, "playerId": "p1", "scorerId": "p1"}
        assert event.data == {"ownScore": 2, "opponentScore": 1}

    def test_build_timeline_consolidates_first(self) -> None:
        entries = build_timeline(
            [
                {"event_type": "goalie_enters", "correlation_id": "g", "player_id": "k1", "ordinal": 2},
                {"event_type": "match_started", "ordinal": 1},
            ]
        )
        assert [entry.type for entry in entries] == ["match_start", "goalie_assignment"]


class TestDescribeEvent:
    """Tests for one-line event summaries."""

    def test_substitution_summary(self) -> None:
        event = MatchEvent(
            event_type="substitution",
            data={"playersOff": ["p2"], "playersOn": ["p1"], "playersOnNames": ["Alex"]},
        )
        assert describe_event(event, {"p2": "Blake"}) == "Off: Blake | On: Alex"

    def test_unhashable_ids_fall_back_to_their_value(self) -> None:
        event = MatchEvent(event_type="substitution", data={"playersOff": [{"id": "p2"}], "playersOn": ["p1"]})
        assert describe_event(event, {"p1": "Alex"}) == "Off: {'id': 'p2'} | On: Alex"

    def test_goalie_switch_summary(self) -> None:
        event = MatchEvent(event_type="goalie_switch", data={"oldGoalieId": "k1", "newGoalieName": "Kim"})
        assert describe_event(event) == "Goalie k1 -> Kim"

    def test_goal_summary_with_score(self) -> None:
        event = MatchEvent(event_type="goal_scored", data={"scorerName": "Alex", "ownScore": 1, "opponentScore": 0})
        assert describe_event(event) == "Alex (1-0)"

    def test_position_group_summary(self) -> None:
        event = MatchEvent(
            event_type="position_switch_group",
            data={"positionChanges": [{"playerId": "p3", "oldPosition": "left", "newPosition": "right"}]},
        )
        assert describe_event(event) == "p3 left -> right"

    def test_unknown_event_without_player(self) -> None:
        assert describe_event(MatchEvent(event_type="period_started")) == ""
