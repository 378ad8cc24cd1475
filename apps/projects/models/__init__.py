from .project_model import Project
from .project_team_model import ProjectTeamMember
from .task_attachment_model import TaskAttachment
from .task_comment_model import TaskComment
from .task_model import Task

__all__ = [
    "Project",
    "ProjectTeamMember",
    "Task",
    "TaskAttachment",
    "TaskComment",
]
