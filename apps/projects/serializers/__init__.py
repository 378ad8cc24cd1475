from .project_serializer import (
    AddTeamMemberSerializer,
    ProjectCreateSerializer,
    ProjectDetailSerializer,
    ProjectListSerializer,
    ProjectTeamMemberSerializer,
    ProjectUpdateSerializer,
)
from .task_attachment_serializer import TaskAttachmentSerializer, TaskAttachmentUploadSerializer
from .task_comment_serializer import TaskCommentSerializer
from .task_serializer import (
    TaskCreateSerializer,
    TaskDetailSerializer,
    TaskListSerializer,
    TaskUpdateSerializer,
)

__all__ = [
    "AddTeamMemberSerializer",
    "ProjectCreateSerializer",
    "ProjectDetailSerializer",
    "ProjectListSerializer",
    "ProjectTeamMemberSerializer",
    "ProjectUpdateSerializer",
    "TaskAttachmentSerializer",
    "TaskAttachmentUploadSerializer",
    "TaskCommentSerializer",
    "TaskCreateSerializer",
    "TaskDetailSerializer",
    "TaskListSerializer",
    "TaskUpdateSerializer",
]
