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
"""Player display-name lookup built from event payloads."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from matchreport.engine.config import CONSOLIDATION_CONFIG, ConsolidationConfig
from matchreport.models.events import MatchEvent

PlayerNameMap = Dict[Any, str]


def primary_name(data: Optional[Mapping[str, Any]], config: Optional[ConsolidationConfig] = None) -> Optional[str]:
    """Extract the main player name carried by an event payload.

    Parameters
    ----------
    data : Mapping[str, Any] | None
        Event payload.
    config : ConsolidationConfig | None
        Configuration providing the ordered name fields; defaults to
        :data:`CONSOLIDATION_CONFIG`.

    Returns
    -------
    str | None
        The first non-empty value among the configured name fields.
    """
    if not data:
        return None
    cfg = config or CONSOLIDATION_CONFIG
    for key in cfg.name_fields:
        value = data.get(key)
        if value:
            return value
    return None


def is_hashable_id(value: Any) -> bool:
    """Return ``True`` when ``value`` is a non-empty identifier usable as a dict key.

    Parameters
    ----------
    value : Any
        Candidate player or correlation identifier.

    Returns
    -------
    bool
        ``False`` for missing, empty and unhashable identifiers.
    """
    if not value:
        return False
    try:
        hash(value)
    except TypeError:
        return False
    return True


def lookup_name(player_name_map: Optional[Mapping[Any, str]], player_id: Any) -> Optional[str]:
    """Look up the display name of ``player_id``.

    Parameters
    ----------
    player_name_map : Mapping[Any, str] | None
        Player identifier to display name map.
    player_id : Any
        Identifier to look up.

    Returns
    -------
    str | None
        The mapped name, or ``None`` when the id is unknown or cannot be a key.
    """
    if not player_name_map or not is_hashable_id(player_id):
        return None
    return player_name_map.get(player_id)


def _positional(values: Any, index: int) -> Any:
    """Return ``values[index]`` when ``values`` is a list long enough.

    Parameters
    ----------
    values : Any
        Candidate list of names.
    index : int
        Position to read.

    Returns
    -------
    Any
        The element, or ``None`` when absent.
    """
    if isinstance(values, Sequence) and not isinstance(values, str) and index < len(values):
        return values[index]
    return None


def build_player_name_map(
    events: Optional[Iterable[MatchEvent]] = None,
    config: Optional[ConsolidationConfig] = None,
) -> PlayerNameMap:
    """Build a player id to display name map from every payload in ``events``.

    The first name seen for an identifier wins; later ones are ignored, so
    rebuilding over the same events always yields the same map.

    Parameters
    ----------
    events : Iterable[MatchEvent] | None
        Raw event records.
    config : ConsolidationConfig | None
        Configuration providing the ordered name fields.

    Returns
    -------
    PlayerNameMap
        Mapping of player identifier to display name.
    """
    names: PlayerNameMap = {}

    def add_name(player_id: Any, name: Any) -> None:
        if not is_hashable_id(player_id) or not name or player_id in names:
            return
        names[player_id] = name

    for event in events or []:
        data = event.data or {}
        name = primary_name(data, config)

        if event.player_id:
            add_name(event.player_id, name)

        hinted = data.get("playerNameMap")
        if isinstance(hinted, Mapping):
            for player_id, hinted_name in hinted.items():
                add_name(player_id, hinted_name)

        for ids_key, names_key in (("playersOff", "playersOffNames"), ("playersOn", "playersOnNames")):
            player_ids = data.get(ids_key)
            if isinstance(player_ids, list):
                for index, player_id in enumerate(player_ids):
                    add_name(player_id, _positional(data.get(names_key), index) or name)

        add_name(data.get("sourcePlayerId"), data.get("sourcePlayerName"))
        add_name(data.get("targetPlayerId"), data.get("targetPlayerName"))
        add_name(data.get("swapPlayerId"), data.get("swapPlayerName"))

        add_name(data.get("goalieId"), data.get("goalieName") or name)
        previous_goalie = data.get("previousGoalieId") or data.get("oldGoalieId")
        add_name(previous_goalie, data.get("previousGoalieName") or name)

    return names
