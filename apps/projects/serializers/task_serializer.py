from django.contrib.auth import get_user_model

from rest_framework import serializers

from apps.projects.models import Task
from base.serializers import ProjectBasicSerializer, UserBasicSerializer

from .task_attachment_serializer import TaskAttachmentSerializer, validate_upload_size
from .task_comment_serializer import TaskCommentSerializer

User = get_user_model()

MAX_INITIAL_FILES = 5


class TaskListSerializer(serializers.ModelSerializer):
    project = ProjectBasicSerializer(read_only=True)
    assigned_to = UserBasicSerializer(read_only=True)
    created_by = UserBasicSerializer(read_only=True)
    progress = serializers.ReadOnlyField()
    is_overdue = serializers.ReadOnlyField()

    class Meta:
        model = Task
        fields = [
            "id",
            "title",
            "project",
            "assigned_to",
            "created_by",
            "priority",
            "status",
            "due_date",
            "progress",
            "is_overdue",
            "tags",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TaskDetailSerializer(TaskListSerializer):
    attachments = TaskAttachmentSerializer(many=True, read_only=True)
    comments = TaskCommentSerializer(many=True, read_only=True)
    dependencies = serializers.PrimaryKeyRelatedField(many=True, read_only=True)
    days_until_due = serializers.ReadOnlyField()

    class Meta(TaskListSerializer.Meta):
        fields = TaskListSerializer.Meta.fields + [
            "description",
            "start_date",
            "completed_date",
            "estimated_hours",
            "actual_hours",
            "dependencies",
            "is_recurring",
            "recurring_pattern",
            "days_until_due",
            "attachments",
            "comments",
        ]
        read_only_fields = fields


class TaskWriteSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True)
    )
    dependencies = serializers.PrimaryKeyRelatedField(
        many=True, queryset=Task.objects.all(), required=False
    )
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )

    class Meta:
        model = Task
        fields = [
            "title",
            "description",
            "assigned_to",
            "priority",
            "due_date",
            "estimated_hours",
            "tags",
            "dependencies",
            "is_recurring",
            "recurring_pattern",
        ]


class TaskCreateSerializer(TaskWriteSerializer):
    """
    The target project is resolved by the route guard from ``project``.
    ``files`` are initial attachments, held to the same size limit as the
    attachments endpoint.
    """

    project = serializers.UUIDField(write_only=True)
    files = serializers.ListField(
        child=serializers.FileField(),
        required=False,
        write_only=True,
        max_length=MAX_INITIAL_FILES,
    )

    class Meta(TaskWriteSerializer.Meta):
        fields = ["project"] + TaskWriteSerializer.Meta.fields + ["files"]

    def validate_files(self, value):
        storage = self.context["attachment_storage"]
        return [validate_upload_size(uploaded_file, storage) for uploaded_file in value]


class TaskUpdateSerializer(TaskWriteSerializer):
    """``project`` and ``created_by`` are fixed at creation and not writable."""

    class Meta(TaskWriteSerializer.Meta):
        fields = TaskWriteSerializer.Meta.fields + ["status", "actual_hours"]
