"""
Plain-id snapshots of the resources an access decision looks at.

The loader builds these from ORM instances so the evaluator compares ids
only and never follows relations.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional
from uuid import UUID


@dataclass(frozen=True)
class ProjectFacts:
    id: UUID
    manager_id: int
    team_lead_id: Optional[int] = None
    members: Mapping[int, str] = field(default_factory=dict)

    @classmethod
    def from_project(cls, project) -> "ProjectFacts":
        return cls(
            id=project.pk,
            manager_id=project.manager_id,
            team_lead_id=project.team_lead_id,
            members={
                member.user_id: member.role for member in project.team_members.all()
            },
        )


@dataclass(frozen=True)
class TaskFacts:
    id: UUID
    project_id: UUID
    assigned_to_id: int
    created_by_id: int

    @classmethod
    def from_task(cls, task) -> "TaskFacts":
        return cls(
            id=task.pk,
            project_id=task.project_id,
            assigned_to_id=task.assigned_to_id,
            created_by_id=task.created_by_id,
        )


@dataclass(frozen=True)
class AccessContext:
    """Facts about the target of an operation; empty for CreateProject."""

    project: Optional[ProjectFacts] = None
    task: Optional[TaskFacts] = None

    @classmethod
    def empty(cls) -> "AccessContext":
        return cls()
