import uuid

from django.conf import settings
from django.db import models


class TaskAttachment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.ForeignKey(
        "projects.Task", on_delete=models.CASCADE, related_name="attachments"
    )
    file = models.FileField(max_length=500)
    filename = models.CharField(max_length=255)
    original_name = models.CharField(max_length=255)
    file_size = models.PositiveBigIntegerField()
    mime_type = models.CharField(max_length=100)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="uploaded_task_attachments",
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "task_attachments"
        verbose_name = "Task Attachment"
        verbose_name_plural = "Task Attachments"
        ordering = ["uploaded_at"]
        indexes = [
            models.Index(fields=["task"], name="task_attach_task_id_2d7b9c_idx"),
            models.Index(fields=["uploaded_by"], name="task_attach_uploade_5e1a4f_idx"),
        ]

    def __str__(self):
        return f"{self.original_name} on {self.task.title}"

    @property
    def file_url(self):
        if self.file:
            return self.file.url
        return None

    @property
    def file_size_mb(self):
        return round(self.file_size / (1024 * 1024), 2)
