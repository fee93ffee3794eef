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
"""Entry point for printing a consolidated match report from an event log."""
import argparse
from collections import Counter
from typing import List, Optional, Sequence

from matchreport.engine.consolidation import consolidate_match_events
from matchreport.engine.names import build_player_name_map
from matchreport.engine.type_mapping import map_database_event_to_ui_type
from matchreport.models.events import MatchEvent
from matchreport.report.timeline import describe_event, format_match_time
from matchreport.utils.debug import ConsolidationDebugger
from matchreport.utils.event_log import load_events_from_json


def format_report_line(event: MatchEvent, summary: str, ui_types: bool = False) -> str:
    """Format one consolidated event as a report line.

    Parameters
    ----------
    event : MatchEvent
        Consolidated event.
    summary : str
        Human-readable description of the event.
    ui_types : bool
        Print the timeline type instead of the stored event type.

    Returns
    -------
    str
        Line of the form ``[period] M:SS  type  summary``.
    """
    period = f"[{event.period}]" if event.period is not None else "[-]"
    clock = format_match_time(event.occurred_at_seconds) or "--:--"
    event_type = map_database_event_to_ui_type(event.event_type) if ui_types else event.event_type
    return f"{period} {clock:>6}  {event_type:<22} {summary}".rstrip()


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser for the ``matchreport`` command.
    """
    parser = argparse.ArgumentParser(description="Print a consolidated match report from an exported event log")
    parser.add_argument("events", type=str, help="Path to the event log JSON file")
    parser.add_argument("--ui-types", action="store_true", help="Show timeline event types instead of stored ones")
    parser.add_argument("--debug-dir", type=str, default=None, help="Write a consolidation trace to this directory")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load an event log, consolidate it and print the match report.

    Parameters
    ----------
    argv : Sequence[str] | None
        Command-line arguments; ``sys.argv`` is used when omitted.

    Returns
    -------
    int
        Process exit code: ``0`` on success, ``1`` when the log cannot be loaded.
    """
    args = build_parser().parse_args(argv)

    try:
        raw_events = load_events_from_json(args.events)
    except (OSError, ValueError) as e:
        print(f"Error loading events from {args.events}: {e}")
        return 1

    names = build_player_name_map(raw_events)
    debugger = ConsolidationDebugger(args.debug_dir) if args.debug_dir else None
    try:
        events: List[MatchEvent] = consolidate_match_events(raw_events, names, debugger=debugger)
    finally:
        if debugger is not None:
            debugger.close()

    print(f"Match report: {len(raw_events)} records -> {len(events)} events")
    print("=" * 60)
    for event in events:
        print(format_report_line(event, describe_event(event, names), args.ui_types))

    counts = Counter(event.event_type for event in events)
    print("\nEvent Summary:")
    for event_type, count in counts.most_common():
        print(f"  {event_type}: {count}")

    if debugger is not None:
        print(f"\nConsolidation trace written to {debugger.log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
