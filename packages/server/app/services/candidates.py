"""Assignment-picker candidates."""

from __future__ import annotations

import uuid
from typing import Iterable, Optional

from timecard_shared.schemas.profiles import ProfileRow
from timecard_shared.schemas.projects import MemberRow


def candidates(
    directory: Iterable[ProfileRow],
    members: Optional[Iterable[MemberRow]],
    focus_profile_id: Optional[uuid.UUID] = None,
) -> list[ProfileRow]:
    """Active profiles that could be added to a project, in directory order.

    ``members`` is the project's currently loaded member set, or ``None`` if it
    has not been loaded; in that case nobody is excluded, so a duplicate
    membership can be added until the set is loaded.
    """
    taken = {m.profile_id for m in members} if members is not None else set()
    return [
        p
        for p in directory
        if p.active
        and (not focus_profile_id or p.id == focus_profile_id)
        and p.id not in taken
    ]


def focus_label(directory: Iterable[ProfileRow], focus_profile_id: Optional[uuid.UUID]) -> str:
    """Header annotation for "managing access for ...": name, else the raw id."""
    if not focus_profile_id:
        return ""
    for p in directory:
        if p.id == focus_profile_id and p.full_name:
            return p.full_name
    return str(focus_profile_id)
