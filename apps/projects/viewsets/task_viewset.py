import logging

from django.db.models import Q

from django_filters import rest_framework as filters
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from apps.logging.services import LoggerService
from apps.projects.access import Operation
from apps.projects.access.loader import load_project, load_task, readable_tasks_filter
from apps.projects.models import Task
from apps.projects.serializers import (
    TaskCreateSerializer,
    TaskDetailSerializer,
    TaskListSerializer,
    TaskUpdateSerializer,
)
from apps.projects.services import TaskService, get_attachment_storage

from .access_mixin import AccessControlledViewMixin

logger = logging.getLogger(__name__)


class TaskFilter(filters.FilterSet):
    """
    Filters for the task list:
    - project (UUID) - Filter by project
    - status / priority - Filter by value
    - assigned_to (int) - Filter by assignee id
    - search (string) - Case-insensitive match on title, description or tags

    Examples:
    - /api/tasks/?project=<uuid>&status=in_progress
    - /api/tasks/?assigned_to=7&ordering=-due_date
    """

    project = filters.UUIDFilter(field_name="project__id")
    status = filters.ChoiceFilter(choices=Task.STATUS_CHOICES)
    priority = filters.ChoiceFilter(choices=Task.PRIORITY_CHOICES)
    assigned_to = filters.NumberFilter(field_name="assigned_to__id")
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = Task
        fields = ["project", "status", "priority", "assigned_to"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(title__icontains=value)
            | Q(description__icontains=value)
            | Q(tags__icontains=value)
        )


@extend_schema_view(
    list=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_list",
        summary="List Tasks",
        description=(
            "Tasks the user can read: tasks of projects they manage, lead or "
            "belong to, plus tasks assigned to or created by them."
        ),
    ),
    retrieve=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_retrieve",
        summary="Get Task Details",
        responses={200: TaskDetailSerializer},
    ),
    create=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_create",
        summary="Create Task",
        description=(
            "Project manager or team lead only. New tasks start as pending. "
            "Multipart requests may include initial attachments under `files`."
        ),
        request=TaskCreateSerializer,
        responses={201: TaskDetailSerializer},
    ),
    update=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_update",
        summary="Update Task",
        request=TaskUpdateSerializer,
        responses={200: TaskDetailSerializer},
    ),
    partial_update=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_partial_update",
        summary="Partial Update Task",
        description=(
            "Status changes stamp start_date on entering in_progress and "
            "completed_date on entering completed; leaving completed clears it."
        ),
        request=TaskUpdateSerializer,
        responses={200: TaskDetailSerializer},
    ),
    destroy=extend_schema(
        tags=["Tasks"],
        operation_id="tasks_destroy",
        summary="Delete Task",
        description="Task creator, project manager or team lead only.",
    ),
)
class TaskViewSet(AccessControlledViewMixin, viewsets.ModelViewSet):
    queryset = Task.objects.all()
    serializer_class = TaskListSerializer
    filterset_class = TaskFilter
    ordering_fields = ["due_date", "priority", "created_at", "updated_at", "status"]
    ordering = ["due_date"]

    access_operations = {
        "create": Operation.CREATE_TASK,
        "retrieve": Operation.READ_TASK,
        "update": Operation.UPDATE_TASK,
        "partial_update": Operation.UPDATE_TASK,
        "destroy": Operation.DELETE_TASK,
    }

    def load_access_resource(self, operation):
        if operation == Operation.CREATE_TASK:
            project_id = self.request.data.get("project")
            if not project_id:
                raise ValidationError({"project": ["This field is required."]})
            return load_project(project_id)
        return load_task(self.kwargs["pk"])

    def get_queryset(self):
        principal = self.get_principal()
        if principal is None:
            return Task.objects.none()
        return (
            Task.objects.filter(readable_tasks_filter(principal))
            .select_related("project", "assigned_to", "created_by")
            .distinct()
        )

    def get_serializer_class(self):
        if self.action == "create":
            return TaskCreateSerializer
        if self.action in ["update", "partial_update"]:
            return TaskUpdateSerializer
        if self.action == "retrieve":
            return TaskDetailSerializer
        return TaskListSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["attachment_storage"] = get_attachment_storage()
        return context

    def get_object(self):
        return self.get_loaded_resource().task

    def _detail_response(self, task, status_code=status.HTTP_200_OK):
        task = (
            Task.objects.select_related("project", "assigned_to", "created_by")
            .prefetch_related(
                "dependencies", "attachments__uploaded_by", "comments__author"
            )
            .get(pk=task.pk)
        )
        serializer = TaskDetailSerializer(task, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def retrieve(self, request, *args, **kwargs):
        return self._detail_response(self.get_object())

    def create(self, request, *args, **kwargs):
        project = self.loaded_resource.project
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        files = serializer.validated_data.pop("files", [])
        task = TaskService.create_task(
            project,
            request.user,
            serializer.validated_data,
            files=files,
            storage=get_attachment_storage(),
        )

        LoggerService.log_info(
            action="task_created",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={
                "task_id": str(task.id),
                "project_id": str(project.id),
                "attachments": len(files),
            },
            resource=task,
        )
        return self._detail_response(task, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        task = self.get_object()
        previous_status = task.status
        serializer = self.get_serializer(task, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        task = TaskService.update_task(task, serializer.validated_data)

        LoggerService.log_info(
            action="task_updated",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={
                "task_id": str(task.id),
                "fields": sorted(request.data.keys()),
                "previous_status": previous_status,
                "status": task.status,
            },
            resource=task,
        )
        return self._detail_response(task)

    def destroy(self, request, *args, **kwargs):
        task = self.get_object()
        task_id = str(task.id)
        project_id = str(task.project_id)

        TaskService.delete_task(task, get_attachment_storage())

        LoggerService.log_info(
            action="task_deleted",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"task_id": task_id, "project_id": project_id},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
