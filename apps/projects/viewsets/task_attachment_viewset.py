from django.core.exceptions import ValidationError as DjangoValidationError

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from apps.logging.services import LoggerService
from apps.projects.access import Operation
from apps.projects.access.loader import load_task
from apps.projects.models import TaskAttachment
from apps.projects.serializers import (
    TaskAttachmentSerializer,
    TaskAttachmentUploadSerializer,
)
from apps.projects.services import TaskService, get_attachment_storage

from .access_mixin import AccessControlledViewMixin


@extend_schema_view(
    list=extend_schema(
        tags=["Tasks"],
        operation_id="task_attachments_list",
        summary="List Task Attachments",
    ),
    create=extend_schema(
        tags=["Tasks"],
        operation_id="task_attachments_create",
        summary="Upload Attachment",
        description=(
            "Same permission as updating the task. The file is stored as-is; "
            "if recording it fails the stored file is removed."
        ),
        request={"multipart/form-data": TaskAttachmentUploadSerializer},
        responses={201: TaskAttachmentSerializer},
    ),
    destroy=extend_schema(
        tags=["Tasks"],
        operation_id="task_attachments_destroy",
        summary="Delete Attachment",
    ),
)
class TaskAttachmentViewSet(
    AccessControlledViewMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = TaskAttachmentSerializer
    parser_classes = [MultiPartParser, FormParser]
    pagination_class = None

    access_operations = {
        "list": Operation.READ_TASK,
        "create": Operation.ADD_ATTACHMENT,
        "destroy": Operation.REMOVE_ATTACHMENT,
    }

    def load_access_resource(self, operation):
        return load_task(self.kwargs["task_pk"])

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return TaskAttachment.objects.none()
        return self.loaded_resource.task.attachments.select_related("uploaded_by")

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["attachment_storage"] = get_attachment_storage()
        return context

    def create(self, request, *args, **kwargs):
        task = self.loaded_resource.task
        serializer = TaskAttachmentUploadSerializer(
            data=request.data, context=self.get_serializer_context()
        )
        serializer.is_valid(raise_exception=True)

        attachment = TaskService.add_attachment(
            task,
            serializer.validated_data["file"],
            request.user,
            get_attachment_storage(),
        )

        LoggerService.log_info(
            action="attachment_added",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={
                "task_id": str(task.id),
                "attachment_id": str(attachment.id),
                "original_name": attachment.original_name,
                "file_size": attachment.file_size,
            },
            resource=task,
        )
        return Response(
            TaskAttachmentSerializer(attachment, context=self.get_serializer_context()).data,
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, *args, **kwargs):
        task = self.loaded_resource.task
        try:
            attachment = task.attachments.get(pk=self.kwargs["pk"])
        except (TaskAttachment.DoesNotExist, DjangoValidationError):
            raise NotFound("Attachment not found.")

        TaskService.remove_attachment(attachment, get_attachment_storage())

        LoggerService.log_info(
            action="attachment_removed",
            user=request.user,
            ip_address=self.get_client_ip(),
            details={"task_id": str(task.id), "attachment_id": self.kwargs["pk"]},
            resource=task,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
