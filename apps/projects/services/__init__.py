from .attachment_storage import AttachmentStorage, configure_attachment_storage, get_attachment_storage
from .project_service import ProjectService
from .task_service import TaskService

__all__ = [
    "AttachmentStorage",
    "ProjectService",
    "TaskService",
    "configure_attachment_storage",
    "get_attachment_storage",
]
