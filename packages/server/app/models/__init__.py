# SQLModel definitions are imported here so metadata is populated for create_all.
from .base import UUIDMixin, TimestampMixin, CreatorMixin  # noqa: F401
from .user import User  # noqa: F401
from .user_role import UserRole  # noqa: F401
from .budget import Budget  # noqa: F401
from .invoice import Invoice  # noqa: F401
from .task import Task  # noqa: F401
from .note import Note  # noqa: F401
