import uuid

from django.conf import settings
from django.db import models


class TaskComment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task = models.ForeignKey(
        "projects.Task", on_delete=models.CASCADE, related_name="comments"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="task_comments",
    )
    content = models.TextField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "task_comments"
        verbose_name = "Task Comment"
        verbose_name_plural = "Task Comments"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["task", "created_at"], name="task_commen_task_id_7a3c8e_idx"),
        ]

    def __str__(self):
        return f"Comment by {self.author.full_name} on {self.task.title}"
