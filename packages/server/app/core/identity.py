"""
Viewer identity as seen by the project workspace.

Identity and sessions belong to the external profile service; the core only
consumes a resolved ``Viewer`` and can ask the provider to sign out.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Protocol

from timecard_shared.schemas.common import Role, is_privileged


@dataclass(frozen=True)
class Viewer:
    user_id: Optional[uuid.UUID]
    org_id: Optional[uuid.UUID]
    role: Optional[Role] = None
    full_name: Optional[str] = None

    @property
    def privileged(self) -> bool:
        return is_privileged(self.role)

    @property
    def resolved(self) -> bool:
        """Both the viewer and their organization are known."""
        return bool(self.user_id) and bool(self.org_id)

    @property
    def key(self) -> tuple:
        """Identity tuple that triggers a new visibility resolution when it changes."""
        return (self.org_id, self.user_id, self.privileged)


class IdentityProvider(Protocol):
    async def current_viewer(self) -> Optional[Viewer]:
        """The signed-in viewer, or ``None`` when nobody is logged in."""
        ...

    async def sign_out(self) -> None:
        ...
