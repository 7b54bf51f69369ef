"""
PerkBoard Backend - Perk Definition Parser
============================================

What:  Converts the hand-authored perk-definition text asset into PerkDefinition records.
Who:   Called by PerkService.load_definitions() for GET /api/perkDefs.

File Format:
    *>Sprint Burst
    When starting to run, break into a sprint at 150% of your
    normal running speed for up to 3 seconds.*<
    Survivor
    All

    - A line containing `*>` starts a record; the rest of the line is the name.
    - Following lines are the description, concatenated with NO separator,
      until a line containing `*<` (the rest of that line is the last chunk).
    - The next line is the owner, the one after that is the role.
    - Empty lines are ignored everywhere. CRLF and LF line endings both work.

Malformed Input:
    Never raises. A record that is not terminated by `*<` before the next
    `*>` (or the end of the file) never reaches owner/role and is dropped
    without being emitted. Lines outside any record are ignored.

The scan is a fold over the lines with an explicit
(records, current, in_description) state, so there is no shared mutable
accumulator and concurrent calls cannot interfere.
"""

from functools import reduce
from typing import Dict, List, NamedTuple, Optional, Tuple

from app.schemas.perk import PerkDefinition

RECORD_START = "*>"
DESCRIPTION_END = "*<"


class _ParseState(NamedTuple):
    records: Tuple[PerkDefinition, ...]
    current: Optional[Dict[str, str]]
    in_description: bool


_INITIAL_STATE = _ParseState(records=(), current=None, in_description=False)


def split_definition_lines(text: str) -> List[str]:
    """Split on LF, strip trailing CRs and drop empty lines."""
    lines = (line.rstrip("\r") for line in text.split("\n"))
    return [line for line in lines if line]


def _step(state: _ParseState, line: str) -> _ParseState:
    records, current, in_description = state

    if RECORD_START in line:
        # Any unfinished record is discarded here
        return _ParseState(
            records,
            {"name": line.replace(RECORD_START, ""), "description": ""},
            True,
        )

    if current is None:
        return state

    if in_description:
        if DESCRIPTION_END in line:
            chunk = line.replace(DESCRIPTION_END, "")
            return _ParseState(
                records, {**current, "description": current["description"] + chunk}, False
            )
        return _ParseState(
            records, {**current, "description": current["description"] + line}, True
        )

    if "owner" not in current:
        return _ParseState(records, {**current, "owner": line}, False)

    finished = PerkDefinition(
        name=current["name"],
        description=current["description"],
        owner=current["owner"],
        role=line,
    )
    return _ParseState(records + (finished,), None, False)


def parse_perk_definitions(text: str) -> List[PerkDefinition]:
    """
    Parse perk-definition text into complete records, in source order.

    Args:
        text: Raw file content (LF or CRLF line endings).

    Returns:
        Every record whose name, description, owner and role were all
        populated. Partial records are never returned.
    """
    final = reduce(_step, split_definition_lines(text), _INITIAL_STATE)
    return list(final.records)
