import logging

from django.db.models import Q

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.response import Response

from apps.logging.services import LoggerService
from apps.projects.access import Operation
from apps.projects.access.loader import load_project, readable_projects_filter
from apps.projects.models import Project
from apps.projects.serializers import (
    ProjectCreateSerializer,
    ProjectDetailSerializer,
    ProjectListSerializer,
    ProjectUpdateSerializer,
)
from apps.projects.services import ProjectService

from .access_mixin import AccessControlledViewMixin

logger = logging.getLogger(__name__)


class ProjectFilter(filters.FilterSet):
    """
    Filters for the project list:
    - status - Filter by project status
    - priority - Filter by priority
    - search (string) - Case-insensitive match on name or description
    """

    status = filters.ChoiceFilter(choices=Project.STATUS_CHOICES)
    priority = filters.ChoiceFilter(choices=Project.PRIORITY_CHOICES)
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Project
        fields = ["status", "priority"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value)
        )


@extend_schema_view(
    list=extend_schema(
        tags=["Projects"],
        operation_id="projects_list",
        summary="List Projects",
        description=(
            "Returns the projects the authenticated user can read: projects they "
            "manage (managers only), lead, or belong to as a team member."
        ),
        parameters=[
            OpenApiParameter(
                name="search",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Search in project name and description",
                required=False,
            ),
        ],
    ),
    retrieve=extend_schema(
        tags=["Projects"],
        operation_id="projects_retrieve",
        summary="Get Project Details",
        description="Project with its team and tasks.",
        responses={200: ProjectDetailSerializer},
    ),
    create=extend_schema(
        tags=["Projects"],
        operation_id="projects_create",
        summary="Create Project",
        description="Managers only. The creator becomes the project manager.",
        request=ProjectCreateSerializer,
        responses={201: ProjectDetailSerializer},
    ),
    update=extend_schema(
        tags=["Projects"],
        operation_id="projects_update",
        summary="Update Project",
        request=ProjectUpdateSerializer,
        responses={200: ProjectDetailSerializer},
    ),
    partial_update=extend_schema(
        tags=["Projects"],
        operation_id="projects_partial_update",
        summary="Partial Update Project",
        description=(
            "Setting team_lead_id requires the user to already be a team member; "
            "null clears the team lead."
        ),
        request=ProjectUpdateSerializer,
        responses={200: ProjectDetailSerializer},
    ),
    destroy=extend_schema(
        tags=["Projects"],
        operation_id="projects_destroy",
        summary="Delete Project",
        description="Refused with has_dependents while the project still has tasks.",
    ),
)
class ProjectViewSet(AccessControlledViewMixin, viewsets.ModelViewSet):
    queryset = Project.objects.all()
    serializer_class = ProjectListSerializer
    filterset_class = ProjectFilter
    ordering_fields = ["created_at", "updated_at", "end_date", "name", "priority"]
    ordering = ["-created_at"]

    access_operations = {
        "create": Operation.CREATE_PROJECT,
        "retrieve": Operation.READ_PROJECT,
        "update": Operation.UPDATE_PROJECT,
        "partial_update": Operation.UPDATE_PROJECT,
        "destroy": Operation.DELETE_PROJECT,
    }

    def load_access_resource(self, operation):
        if operation == Operation.CREATE_PROJECT:
            return None
        return load_project(self.kwargs["pk"])

    def get_queryset(self):
        principal = self.get_principal()
        if principal is None:
            return Project.objects.none()
        return (
            Project.objects.filter(readable_projects_filter(principal))
            .select_related("manager", "team_lead")
            .prefetch_related("team_members__user")
            .distinct()
        )

    def get_serializer_class(self):
        if self.action == "create":
            return ProjectCreateSerializer
        if self.action in ["update", "partial_update"]:
            return ProjectUpdateSerializer
        if self.action == "retrieve":
            return ProjectDetailSerializer
        return ProjectListSerializer

    def get_object(self):
        return self.get_loaded_resource().project

    def _detail_response(self, project, status_code=status.HTTP_200_OK):
        project = load_project(project.pk).project
        serializer = ProjectDetailSerializer(project, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.create_project(request.user, serializer.validated_data)

        LoggerService.log_info(
            action="project_created",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"project_id": str(project.id), "project_name": project.name},
            resource=project,
        )
        return self._detail_response(project, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        project = self.get_object()
        serializer = self.get_serializer(project, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.update_project(project, serializer.validated_data)

        LoggerService.log_info(
            action="project_updated",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={
                "project_id": str(project.id),
                "fields": sorted(request.data.keys()),
            },
            resource=project,
        )
        return self._detail_response(project)

    def destroy(self, request, *args, **kwargs):
        project = self.get_object()
        project_id = str(project.id)
        project_name = project.name

        ProjectService.delete_project(project)

        LoggerService.log_info(
            action="project_deleted",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"project_id": project_id, "project_name": project_name},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
