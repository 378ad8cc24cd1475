from .project_team_viewset import ProjectTeamViewSet
from .project_viewset import ProjectViewSet
from .task_attachment_viewset import TaskAttachmentViewSet
from .task_comment_viewset import TaskCommentViewSet
from .task_viewset import TaskViewSet

__all__ = [
    "ProjectViewSet",
    "ProjectTeamViewSet",
    "TaskViewSet",
    "TaskAttachmentViewSet",
    "TaskCommentViewSet",
]
