"""
Loads the target resource of a request and snapshots its access facts.

Nothing is cached: each call reads the current rows so a decision is made
against the state the mutation will be applied to.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db.models import Q

from rest_framework.exceptions import NotFound

from apps.projects.models import Project, Task

from .context import AccessContext, ProjectFacts, TaskFacts
from .policy import ROLE_MANAGER
from .principal import Principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedResource:
    context: AccessContext
    project: Optional[Project] = None
    task: Optional[Task] = None


def _project_queryset():
    return Project.objects.select_related("manager", "team_lead").prefetch_related(
        "team_members__user"
    )


def load_project(project_id) -> LoadedResource:
    """Load a project with its team; a missing or malformed id is NotFound."""
    try:
        project = _project_queryset().get(pk=project_id)
    except (ObjectDoesNotExist, ValidationError, ValueError, TypeError):
        logger.debug(f"Project {project_id!r} not found")
        raise NotFound("Project not found.")

    return LoadedResource(
        context=AccessContext(project=ProjectFacts.from_project(project)),
        project=project,
    )


def load_task(task_id) -> LoadedResource:
    """Load a task together with its parent project and that project's team."""
    try:
        task = (
            Task.objects.select_related(
                "assigned_to",
                "created_by",
                "project__manager",
                "project__team_lead",
            )
            .prefetch_related("project__team_members__user")
            .get(pk=task_id)
        )
    except (ObjectDoesNotExist, ValidationError, ValueError, TypeError):
        logger.debug(f"Task {task_id!r} not found")
        raise NotFound("Task not found.")

    project = task.project
    return LoadedResource(
        context=AccessContext(
            project=ProjectFacts.from_project(project),
            task=TaskFacts.from_task(task),
        ),
        project=project,
        task=task,
    )


def readable_projects_filter(principal: Principal) -> Q:
    """Query form of the ReadProject rule."""
    condition = Q(team_members__user_id=principal.id) | Q(team_lead_id=principal.id)
    if principal.role == ROLE_MANAGER:
        condition |= Q(manager_id=principal.id)
    return condition


def readable_tasks_filter(principal: Principal) -> Q:
    """Query form of the ReadTask rule."""
    return (
        Q(project__manager_id=principal.id)
        | Q(assigned_to_id=principal.id)
        | Q(created_by_id=principal.id)
        | Q(project__team_members__user_id=principal.id)
        | Q(project__team_lead_id=principal.id)
    )
