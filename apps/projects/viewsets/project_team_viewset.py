"""
ViewSet for managing project team members.
Provides endpoints for listing, adding and removing team members.
"""

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from apps.logging.services import LoggerService
from apps.projects.access import Operation
from apps.projects.access.loader import load_project
from apps.projects.models import ProjectTeamMember
from apps.projects.serializers import (
    AddTeamMemberSerializer,
    ProjectDetailSerializer,
    ProjectTeamMemberSerializer,
)
from apps.projects.services import ProjectService

from .access_mixin import AccessControlledViewMixin


@extend_schema_view(
    list=extend_schema(
        tags=["Projects"],
        operation_id="project_team_members_list",
        summary="List Project Team Members",
        description="Team members of a project the user can read.",
    ),
    create=extend_schema(
        tags=["Projects"],
        operation_id="project_team_members_create",
        summary="Add Team Member",
        description=(
            "Project manager only. Adding an existing member, or a second team "
            "lead, is a conflict. A team_lead member becomes the project's team lead."
        ),
        request=AddTeamMemberSerializer,
        responses={201: ProjectDetailSerializer},
    ),
    destroy=extend_schema(
        tags=["Projects"],
        operation_id="project_team_members_destroy",
        summary="Remove Team Member",
        description="Project manager only. Removing the team lead clears the lead.",
        responses={200: ProjectDetailSerializer},
    ),
)
class ProjectTeamViewSet(
    AccessControlledViewMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """
    Nested under ``/projects/{project_pk}/team/``. Members are addressed by
    their user id.
    """

    serializer_class = ProjectTeamMemberSerializer
    pagination_class = None

    access_operations = {
        "list": Operation.READ_PROJECT,
        "create": Operation.ADD_TEAM_MEMBER,
        "destroy": Operation.REMOVE_TEAM_MEMBER,
    }

    def load_access_resource(self, operation):
        return load_project(self.kwargs["project_pk"])

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return ProjectTeamMember.objects.none()
        return self.loaded_resource.project.team_members.select_related("user")

    def _project_response(self, project, status_code):
        project = load_project(project.pk).project
        serializer = ProjectDetailSerializer(project, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        project = self.loaded_resource.project
        serializer = AddTeamMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user_id"]
        role = serializer.validated_data["role"]

        ProjectService.add_team_member(project, user, role)

        LoggerService.log_info(
            action="team_member_added",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={
                "project_id": str(project.id),
                "member_id": user.id,
                "role": role,
            },
            resource=project,
        )
        return self._project_response(project, status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        project = self.loaded_resource.project
        user_id = self.kwargs["user_pk"]

        ProjectService.remove_team_member(project, user_id)

        LoggerService.log_info(
            action="team_member_removed",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"project_id": str(project.id), "member_id": user_id},
            resource=project,
        )
        return self._project_response(project, status.HTTP_200_OK)
