"""Task-related Pydantic schemas for shared use across server and frontend codegen."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, UUID4

from .common import PatchModel, TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=300)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.BACKLOG
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    assignee_user_id: Optional[UUID4] = None
    tags: List[str] = Field(default_factory=list)


class TaskUpdate(PatchModel):
    non_nullable = ("title", "status", "priority", "tags")

    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    assignee_user_id: Optional[UUID4] = None
    tags: Optional[List[str]] = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    assignee_user_id: Optional[UUID4] = None
    tags: List[str] = Field(default_factory=list)
    created_by: UUID4
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    data: TaskRead


class TaskListResponse(BaseModel):
    data: List[TaskRead]
