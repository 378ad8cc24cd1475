from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from apps.logging.services import LoggerService
from apps.projects.access import Operation
from apps.projects.access.loader import load_task
from apps.projects.models import TaskComment
from apps.projects.serializers import TaskCommentSerializer
from apps.projects.services import TaskService

from .access_mixin import AccessControlledViewMixin


@extend_schema_view(
    list=extend_schema(
        tags=["Tasks"],
        operation_id="task_comments_list",
        summary="List Task Comments",
    ),
    create=extend_schema(
        tags=["Tasks"],
        operation_id="task_comments_create",
        summary="Add Comment",
        description="Anyone who can read the task can comment on it.",
    ),
)
class TaskCommentViewSet(
    AccessControlledViewMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = TaskCommentSerializer

    access_operations = {
        "list": Operation.READ_TASK,
        "create": Operation.ADD_COMMENT,
    }

    def load_access_resource(self, operation):
        return load_task(self.kwargs["task_pk"])

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return TaskComment.objects.none()
        return self.loaded_resource.task.comments.select_related("author")

    def create(self, request, *args, **kwargs):
        task = self.loaded_resource.task
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = TaskService.add_comment(
            task, request.user, serializer.validated_data["content"]
        )

        LoggerService.log_info(
            action="comment_added",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"task_id": str(task.id), "comment_id": str(comment.id)},
            resource=task,
        )
        return Response(
            self.get_serializer(comment).data, status=status.HTTP_201_CREATED
        )
