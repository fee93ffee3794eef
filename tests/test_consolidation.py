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
"""Tests for the end-to-end consolidation pipeline."""

from __future__ import annotations

import copy

from matchreport.engine.consolidation import consolidate_match_events
from matchreport.engine.ordering import sort_events_by_ordinal
from matchreport.models.events import MatchEvent
from matchreport.utils.debug import ConsolidationDebugger


def _match_log() -> list:
    """Return a realistic raw log for one period with mixed record kinds."""
    return [
        {"event_type": "match_started", "ordinal": 1, "created_at": "2024-05-01T10:00:00Z", "occurred_at_seconds": 0},
        {"event_type": "period_started", "ordinal": 2, "period": 1, "occurred_at_seconds": 0},
        {
            "event_type": "substitution_out",
            "correlation_id": "s1",
            "player_id": "p2",
            "ordinal": 4,
            "period": 1,
            "occurred_at_seconds": 300,
            "data": {"playerName": "Blake"},
        },
        {
            "event_type": "substitution_in",
            "correlation_id": "s1",
            "player_id": "p1",
            "ordinal": 3,
            "period": 1,
            "occurred_at_seconds": 301,
            "data": {"playerName": "Alex"},
        },
        {
            "event_type": "goal_scored",
            "player_id": "p1",
            "ordinal": 5,
            "period": 1,
            "occurred_at_seconds": 420,
            "data": {"scorerName": "Alex", "ownScore": 1, "opponentScore": 0},
        },
        {"event_type": "goalie_exits", "correlation_id": "g1", "player_id": "k1", "ordinal": 7, "period": 1},
        {"event_type": "goalie_enters", "correlation_id": "g1", "player_id": "k2", "ordinal": 6, "period": 1},
        {"event_type": "position_switch", "correlation_id": "m1", "player_id": "p3", "ordinal": 8,
         "data": {"old_position": "leftDefender", "new_position": "rightDefender"}},
        {"event_type": "period_ended", "ordinal": 9, "period": 1, "occurred_at_seconds": 1200},
    ]


class TestScenarios:
    """Concrete behaviours of the consolidated output."""

    def test_substitution_pair_collapses_to_one_event(self) -> None:
        events = [
            {"event_type": "substitution_in", "correlation_id": "c1", "player_id": "p1", "ordinal": 2},
            {"event_type": "substitution_out", "correlation_id": "c1", "player_id": "p2", "ordinal": 1},
        ]
        result = consolidate_match_events(events)
        assert len(result) == 1
        event = result[0]
        assert event.event_type == "substitution"
        assert event.data["playersOn"] == ["p1"]
        assert event.data["playersOff"] == ["p2"]
        assert event.ordinal == 1
        assert event.id == "sub-c1"

    def test_unrelated_events_pass_through_in_order(self) -> None:
        events = [
            MatchEvent(event_type="goal_scored", ordinal=1),
            MatchEvent(event_type="goal_conceded", ordinal=2),
        ]
        result = consolidate_match_events(events)
        assert [e.ordinal for e in result] == [1, 2]
        assert [e.event_type for e in result] == ["goal_scored", "goal_conceded"]

    def test_switch_into_goal_becomes_goalie_switch(self) -> None:
        events = [
            {
                "event_type": "position_switch",
                "correlation_id": "x",
                "player_id": "p7",
                "data": {"old_position": "leftDefender", "new_position": "goalie"},
            }
        ]
        (event,) = consolidate_match_events(events)
        assert event.event_type == "goalie_switch"
        assert event.data["newGoalieId"] == "p7"

    def test_goalie_exit_and_enter_yield_single_goalie_switch(self) -> None:
        events = [
            {"event_type": "goalie_exits", "correlation_id": "g", "player_id": "k1"},
            {"event_type": "goalie_enters", "correlation_id": "g", "player_id": "k2"},
        ]
        result = consolidate_match_events(events)
        assert len(result) == 1
        assert result[0].event_type == "goalie_switch"
        assert result[0].data["oldGoalieId"] == "k1"
        assert result[0].data["newGoalieId"] == "k2"

    def test_repeated_substitution_in_is_deduplicated(self) -> None:
        events = [
            {"event_type": "substitution_in", "correlation_id": "c1", "player_id": "p1"},
            {"event_type": "substitution_in", "correlation_id": "c1", "player_id": "p1"},
        ]
        (event,) = consolidate_match_events(events)
        assert event.data["playersOn"] == ["p1"]


class TestPipeline:
    """Properties of the full pipeline."""

    def test_empty_and_none_input(self) -> None:
        assert consolidate_match_events([]) == []
        assert consolidate_match_events(None) == []

    def test_full_log_order_and_count(self) -> None:
        result = consolidate_match_events(_match_log())
        # 4 pass-through + 1 substitution + 2 position/goalie groups
        assert len(result) == 7
        assert [e.event_type for e in result] == [
            "match_started",
            "period_started",
            "substitution",
            "goal_scored",
            "goalie_switch",
            "position_switch_group",
            "period_ended",
        ]
        assert [e.ordinal for e in result] == [1, 2, 3, 5, 6, 8, 9]
        assert result[2].data["playersOnNames"] == ["Alex"]
        assert result[2].data["playersOffNames"] == ["Blake"]
        assert result[2].occurred_at_seconds == 300

    def test_completeness_counts_each_correlation_id_once(self) -> None:
        raw = _match_log()
        result = consolidate_match_events(raw)
        pass_through = [r for r in raw if not r.get("correlation_id")]
        correlation_ids = {r["correlation_id"] for r in raw if r.get("correlation_id")}
        assert len(result) == len(pass_through) + len(correlation_ids)
        composite_ids = [e.id for e in result if e.id]
        assert len(composite_ids) == len(set(composite_ids))

    def test_input_is_not_mutated(self) -> None:
        raw = _match_log()
        snapshot = copy.deepcopy(raw)
        consolidate_match_events(raw)
        assert raw == snapshot

    def test_output_is_already_sorted(self) -> None:
        result = consolidate_match_events(_match_log())
        assert sort_events_by_ordinal(result) == result

    def test_name_map_argument_is_used(self) -> None:
        events = [{"event_type": "goalie_enters", "correlation_id": "g", "player_id": "k9"}]
        (event,) = consolidate_match_events(events, {"k9": "Kim"})
        assert event.event_type == "goalie_enters"
        assert event.data["goalieName"] == "Kim"

    def test_name_map_is_derived_when_missing(self) -> None:
        events = [
            {"event_type": "goal_scored", "player_id": "k9", "ordinal": 1, "data": {"scorerName": "Kim"}},
            {"event_type": "goalie_enters", "correlation_id": "g", "player_id": "k9", "ordinal": 2},
        ]
        result = consolidate_match_events(events)
        assert result[1].data["goalieName"] == "Kim"

    def test_unknown_event_types_pass_through(self) -> None:
        events = [{"event_type": "weather_delay", "correlation_id": "w", "custom_field": 3}]
        (event,) = consolidate_match_events(events)
        assert event.event_type == "weather_delay"
        assert event.extra == {"custom_field": 3}
        assert event.source_index == 0

    def test_unhashable_ids_in_payload_lists(self) -> None:
        events = [
            {"event_type": "substitution", "ordinal": 1, "data": {"playersOff": [{"id": "p1"}], "playersOn": ["p2"],
                                                                 "playersOnNames": ["Alex"]}},
        ]
        (event,) = consolidate_match_events(events)
        assert event.event_type == "substitution"
        assert event.data["playersOff"] == [{"id": "p1"}]

    def test_unhashable_record_ids_give_best_effort_output(self) -> None:
        events = [
            {"event_type": "substitution_in", "correlation_id": "c", "player_id": ["p1"], "ordinal": 2},
            {"event_type": "substitution_out", "correlation_id": "c", "player_id": "p2", "ordinal": 1,
             "data": {"playerName": "Blake"}},
            {"event_type": "goal_scored", "correlation_id": ["x"], "ordinal": 3},
        ]
        result = consolidate_match_events(events, {})
        assert [e.event_type for e in result] == ["substitution", "goal_scored"]
        assert result[0].data["playersOn"] == [["p1"]]
        assert result[0].data["playersOffNames"] == ["Blake"]
        assert "playersOnNames" not in result[0].data

    def test_debugger_logs_unusable_ids(self, tmp_path) -> None:
        with ConsolidationDebugger(str(tmp_path)) as debugger:
            consolidate_match_events(
                [
                    {"event_type": "substitution_in", "correlation_id": "c1", "player_id": {"id": "p1"}},
                    {"event_type": "position_switch", "correlation_id": ["m1"], "player_id": "p2"},
                ],
                debugger=debugger,
            )
            recent = debugger.get_recent_events()
        errors = [line for line in recent if "ERROR" in line]
        assert any("player_id" in line and "Source #0" in line for line in errors)
        assert any("correlation_id" in line and "Source #1" in line for line in errors)

    def test_debugger_traces_decisions(self, tmp_path) -> None:
        with ConsolidationDebugger(str(tmp_path)) as debugger:
            consolidate_match_events(
                [
                    {"event_type": "substitution_in", "correlation_id": "c1", "player_id": "p1"},
                    {"event_type": "goal_scored", "created_at": "yesterday"},
                ],
                debugger=debugger,
            )
            recent = debugger.get_recent_events()
        assert any("GROUP_OPENED" in line and "c1" in line for line in recent)
        assert any("PASS_THROUGH" in line for line in recent)
        assert any("BAD_TIMESTAMP" in line and "yesterday" in line for line in recent)
        assert any("COMPOSITE" in line and "substitution" in line for line in recent)
