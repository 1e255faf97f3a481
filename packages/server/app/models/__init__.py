# SQLModel definitions — imported here to ensure metadata is populated for create_all.
from .base import UUIDMixin, CreatedAtMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .profile import Profile  # noqa: F401
from .project import Project  # noqa: F401
from .project_member import ProjectMember  # noqa: F401
