from enum import Enum
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, model_validator

# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


class Role(str, Enum):
    LEAD = "lead"
    NON_LEAD = "non_lead"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BudgetStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class PeriodType(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


class InvoiceStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    OVERDUE = "overdue"


class TaskStatus(str, Enum):
    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NoteType(str, Enum):
    GENERAL = "general"
    MEETING = "meeting"
    DECISION = "decision"
    IDEA = "idea"


class PatchModel(BaseModel):
    """Base for partial updates.

    Only declared fields are accepted; anything else in the body is rejected.
    Fields named in ``non_nullable`` may be omitted but not explicitly nulled.
    """

    model_config = ConfigDict(extra="forbid")

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_nulls(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields explicitly present in the request, enums flattened to values."""
        data = self.model_dump(exclude_unset=True)
        return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


class SuccessResponse(BaseModel):
    success: bool = True


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value
