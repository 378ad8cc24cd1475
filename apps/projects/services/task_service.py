"""
Mutations on tasks, their attachments and comments.
"""
import logging

from django.db import transaction

from apps.logging.services import LoggerService
from apps.projects.models import Task, TaskAttachment, TaskComment
from base.exceptions import InvariantViolation

from .attachment_storage import AttachmentStorage

logger = logging.getLogger(__name__)


class TaskService:
    @staticmethod
    def validate_dependencies(project_id, dependencies, task=None):
        for dependency in dependencies:
            if dependency.project_id != project_id:
                raise InvariantViolation(
                    "Dependencies must belong to the same project.",
                    field="dependencies",
                )
            if task is not None and dependency.pk == task.pk:
                raise InvariantViolation(
                    "A task cannot depend on itself.", field="dependencies"
                )

    @staticmethod
    @transaction.atomic
    def create_task(project, creator, validated_data, files=(), storage: AttachmentStorage = None) -> Task:
        """
        Create a task in ``project``. New tasks always start as pending.
        ``files`` become attachments through ``add_attachment``.
        """
        data = dict(validated_data)
        dependencies = data.pop("dependencies", [])
        data.pop("project", None)
        data["status"] = Task.STATUS_PENDING

        TaskService.validate_dependencies(project.pk, dependencies)

        task = Task.objects.create(project=project, created_by=creator, **data)
        if dependencies:
            task.dependencies.set(dependencies)

        stored = []
        try:
            for uploaded_file in files:
                stored.append(TaskService.add_attachment(task, uploaded_file, creator, storage))
        except Exception:
            for attachment in stored:
                storage.delete(attachment.file.name)
            raise

        logger.info(f"Task {task.id} created in project {project.id} by user {creator.id}")
        return task

    @staticmethod
    @transaction.atomic
    def update_task(task: Task, validated_data) -> Task:
        """
        Apply an update. A status change corrects ``start_date`` and
        ``completed_date`` on save; any status may follow any other.
        """
        data = dict(validated_data)
        dependencies = data.pop("dependencies", None)

        if dependencies is not None:
            TaskService.validate_dependencies(task.project_id, dependencies, task=task)

        previous_status = task.status
        for attr, value in data.items():
            setattr(task, attr, value)
        task.save()

        if dependencies is not None:
            task.dependencies.set(dependencies)

        if previous_status != task.status:
            logger.info(f"Task {task.id} moved from {previous_status} to {task.status}")
        return task

    @staticmethod
    @transaction.atomic
    def delete_task(task: Task, storage: AttachmentStorage):
        blob_names = list(task.attachments.values_list("file", flat=True))
        task.delete()

        def _delete_blobs():
            for name in blob_names:
                storage.delete(name)

        transaction.on_commit(_delete_blobs)

    @staticmethod
    def add_attachment(task: Task, uploaded_file, user, storage: AttachmentStorage) -> TaskAttachment:
        """
        Store the blob first, then record its metadata. If recording fails the
        stored blob is removed before the error propagates.
        """
        stored_name = storage.save(task.pk, uploaded_file)
        try:
            with transaction.atomic():
                attachment = TaskAttachment.objects.create(
                    task=task,
                    file=stored_name,
                    filename=stored_name.rsplit("/", 1)[-1],
                    original_name=uploaded_file.name,
                    file_size=uploaded_file.size,
                    mime_type=storage.guess_mime_type(uploaded_file),
                    uploaded_by=user,
                )
        except Exception as e:
            logger.error(f"Failed to record attachment {stored_name}, removing stored blob")
            LoggerService.log_error(
                action="attachment_store_failed",
                error=str(e),
                user=user,
                details={"task_id": str(task.pk), "blob": stored_name},
                resource=task,
                severity="high",
            )
            storage.delete(stored_name)
            raise

        logger.info(f"Attachment {attachment.id} added to task {task.id}")
        return attachment

    @staticmethod
    def remove_attachment(attachment: TaskAttachment, storage: AttachmentStorage):
        attachment_id = attachment.pk
        stored_name = attachment.file.name
        attachment.delete()
        storage.delete(stored_name)
        logger.info(f"Attachment {attachment_id} removed from task {attachment.task_id}")

    @staticmethod
    def add_comment(task: Task, author, content: str) -> TaskComment:
        return TaskComment.objects.create(task=task, author=author, content=content)
