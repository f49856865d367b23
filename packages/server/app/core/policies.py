"""
Row-level access policies.

One declarative ``Policy`` per resource type. A policy answers two questions
from the same data:

- ``decide(policy, caller, action, record)``: a pure allow/deny over the
  caller's role and id and the record's ownership fields. Used for
  create/update/delete after the record has been loaded.
- ``policy.read_filter(model, caller)``: the SQL predicate equivalent of the
  read rule, applied inside list queries.

Leads bypass every row filter. A non-lead is allowed through a scoped rule
when their id matches any of the rule's ownership fields on the record.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Optional

import structlog
from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from sqlalchemy import false, or_

from app.core.auth import AuthenticatedUser, get_authenticated_user
from app.core.errors import Forbidden, ValidationError

log = structlog.get_logger()


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


# Ownership scope for non-leads. ``None`` = unrestricted, ``()`` = denied.
Scope = Optional[tuple[str, ...]]

EVERYONE: Scope = None
LEAD_ONLY: Scope = ()


@dataclass(frozen=True)
class Policy:
    resource: str
    entity: str
    read: Scope
    create: Scope
    write: Scope  # update and delete

    def scope_for(self, action: Action) -> Scope:
        if action is Action.READ:
            return self.read
        if action is Action.CREATE:
            return self.create
        return self.write

    def read_filter(self, model: Any, caller: AuthenticatedUser):
        """SQL predicate restricting ``model`` rows to what ``caller`` may read.

        Returns None when no restriction applies.
        """
        if caller.is_lead or self.read is None:
            return None
        if not self.read:
            return false()
        return or_(*(getattr(model, field) == caller.user_id for field in self.read))


def _owns(caller_id: uuid.UUID, record: Any, fields: tuple[str, ...]) -> bool:
    return any(getattr(record, field, None) == caller_id for field in fields)


def decide(
    policy: Policy,
    caller: AuthenticatedUser,
    action: Action,
    record: Any = None,
) -> bool:
    """Pure allow/deny decision for ``caller`` performing ``action``."""
    if caller.is_lead:
        return True
    scope = policy.scope_for(action)
    if scope is None:
        return True
    if not scope or record is None:
        return False
    return _owns(caller.user_id, record, scope)


def authorize(
    policy: Policy,
    caller: AuthenticatedUser,
    action: Action,
    record: Any = None,
) -> None:
    """Raise Forbidden unless ``decide`` allows the action."""
    if decide(policy, caller, action, record):
        return
    log.info(
        "policy.denied",
        resource=policy.resource,
        action=action.value,
        user_id=str(caller.user_id),
        record_id=str(getattr(record, "id", "")) or None,
    )
    raise Forbidden()


# ---------------------------------------------------------------------------
# Policy table
# ---------------------------------------------------------------------------

BUDGETS = Policy(
    resource="budgets",
    entity="budget",
    read=EVERYONE,
    create=LEAD_ONLY,
    write=LEAD_ONLY,
)

INVOICES = Policy(
    resource="invoices",
    entity="invoice",
    read=("assigned_user_id",),
    create=LEAD_ONLY,
    write=LEAD_ONLY,
)

TASKS = Policy(
    resource="tasks",
    entity="task",
    read=("assignee_user_id", "created_by"),
    create=EVERYONE,
    write=("assignee_user_id", "created_by"),
)

NOTES = Policy(
    resource="notes",
    entity="note",
    read=("created_by",),
    create=EVERYONE,
    write=("created_by",),
)

TEAM = Policy(
    resource="team",
    entity="user",
    read=EVERYONE,
    create=LEAD_ONLY,
    write=LEAD_ONLY,
)

POLICIES: dict[str, Policy] = {
    p.resource: p for p in (BUDGETS, INVOICES, TASKS, NOTES, TEAM)
}


@lru_cache(maxsize=None)
def require_create(policy: Policy):
    """Dependency enforcing the create rule.

    Cached per policy so that FastAPI resolves it once per request even when
    both the endpoint and ``create_body`` depend on it.
    """

    async def dependency(
        auth: AuthenticatedUser = Depends(get_authenticated_user),
    ) -> AuthenticatedUser:
        authorize(policy, auth, Action.CREATE)
        return auth

    return dependency


def create_body(policy: Policy, schema: type[BaseModel]):
    """Dependency parsing the JSON body into ``schema`` once the create rule passed.

    FastAPI decodes declared body parameters before any dependency runs, so the
    body is read here instead: an unauthenticated or forbidden caller gets
    401/403 whatever they sent.
    """

    async def dependency(
        request: Request,
        auth: AuthenticatedUser = Depends(require_create(policy)),
    ) -> BaseModel:
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Invalid JSON body")
        try:
            return schema.model_validate(payload)
        except SchemaError as exc:
            raise RequestValidationError(exc.errors())

    return dependency
