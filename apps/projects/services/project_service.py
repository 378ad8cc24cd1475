"""
Mutations on projects and their teams.

Authorization has already been decided by the route guard when these run;
the service only keeps the data invariants:

* ``end_date`` is strictly after ``start_date``;
* ``project.team_lead`` always points at the one membership whose role is
  ``team_lead``, or is null when there is none;
* a project that owns tasks cannot be deleted.
"""
import logging

from django.db import transaction
from django.db.models import ProtectedError

from rest_framework.exceptions import NotFound

from apps.projects.models import Project, ProjectTeamMember
from base.exceptions import Conflict, HasDependents, InvariantViolation

logger = logging.getLogger(__name__)

UNSET = object()


class ProjectService:
    @staticmethod
    def validate_schedule(start_date, end_date):
        if start_date is not None and end_date is not None and end_date <= start_date:
            raise InvariantViolation("End date must be after start date.", field="end_date")

    @staticmethod
    @transaction.atomic
    def create_project(manager, validated_data) -> Project:
        ProjectService.validate_schedule(
            validated_data.get("start_date"), validated_data.get("end_date")
        )
        project = Project.objects.create(manager=manager, **validated_data)
        logger.info(f"Project {project.id} created by user {manager.id}")
        return project

    @staticmethod
    @transaction.atomic
    def update_project(project: Project, validated_data) -> Project:
        data = dict(validated_data)
        team_lead = data.pop("team_lead", UNSET)

        ProjectService.validate_schedule(
            data.get("start_date", project.start_date),
            data.get("end_date", project.end_date),
        )

        for attr, value in data.items():
            setattr(project, attr, value)

        if team_lead is not UNSET:
            ProjectService._reassign_team_lead(project, team_lead)

        project.save()
        return project

    @staticmethod
    def _reassign_team_lead(project: Project, new_lead):
        if new_lead is not None and new_lead.pk == project.team_lead_id:
            return

        new_membership = None
        if new_lead is not None:
            new_membership = ProjectTeamMember.objects.filter(
                project=project, user=new_lead
            ).first()
            if new_membership is None:
                raise InvariantViolation(
                    "The team lead must be a member of the project team.",
                    field="team_lead",
                )

        ProjectTeamMember.objects.filter(
            project=project, role=ProjectTeamMember.ROLE_TEAM_LEAD
        ).update(role=ProjectTeamMember.ROLE_TEAM_MEMBER)

        if new_membership is not None:
            new_membership.role = ProjectTeamMember.ROLE_TEAM_LEAD
            new_membership.save(update_fields=["role"])

        project.team_lead = new_lead

    @staticmethod
    @transaction.atomic
    def delete_project(project: Project):
        task_count = project.tasks.count()
        if task_count:
            raise HasDependents(
                f"Cannot delete a project that still has {task_count} task(s)."
            )
        try:
            project.delete()
        except ProtectedError:
            raise HasDependents("Cannot delete a project that still has tasks.")
        logger.info(f"Project {project.pk} deleted")

    @staticmethod
    @transaction.atomic
    def add_team_member(project: Project, user, role=ProjectTeamMember.ROLE_TEAM_MEMBER):
        locked = Project.objects.select_for_update().get(pk=project.pk)

        if ProjectTeamMember.objects.filter(project=locked, user=user).exists():
            raise Conflict("User is already a member of this project.", field="user_id")

        if role == ProjectTeamMember.ROLE_TEAM_LEAD and locked.team_lead_id is not None:
            raise Conflict("Project already has a team lead.", field="role")

        membership = ProjectTeamMember.objects.create(project=locked, user=user, role=role)

        if role == ProjectTeamMember.ROLE_TEAM_LEAD:
            locked.team_lead = user
            locked.save(update_fields=["team_lead", "updated_at"])
            project.team_lead = user

        logger.info(f"User {user.id} added to project {project.id} as {role}")
        return membership

    @staticmethod
    @transaction.atomic
    def remove_team_member(project: Project, user_id):
        locked = Project.objects.select_for_update().get(pk=project.pk)

        membership = ProjectTeamMember.objects.filter(project=locked, user_id=user_id).first()
        if membership is None:
            raise NotFound("User is not a member of this project.")

        membership.delete()

        if locked.team_lead_id == membership.user_id:
            locked.team_lead = None
            locked.save(update_fields=["team_lead", "updated_at"])
            project.team_lead = None

        logger.info(f"User {user_id} removed from project {project.id}")
