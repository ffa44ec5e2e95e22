"""
Wire encoding of status snapshots.

Every response is one line with the same two keys. The name is embedded
as-is: it comes from the control data table, already bounded in length,
and is not escaped.
"""

from __future__ import annotations

from .types import NoForegroundApplication, ResolvedApplication, Sleeping, StatusSnapshot

SLEEP_NAME = "sleep"
HOME_MENU_NAME = "On Home Menu"

_LINE = '{{"game_title_id": {title_id}, "game_name": "{name}"}}\n'


def encode(snapshot: StatusSnapshot) -> str:
    if isinstance(snapshot, ResolvedApplication):
        return _LINE.format(title_id=f'"{snapshot.program_id:016X}"', name=snapshot.name)
    if isinstance(snapshot, Sleeping):
        return _LINE.format(title_id="null", name=SLEEP_NAME)
    if isinstance(snapshot, NoForegroundApplication):
        return _LINE.format(title_id="null", name=HOME_MENU_NAME)
    raise TypeError(f"not a status snapshot: {snapshot!r}")
