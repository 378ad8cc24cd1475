import uuid

from django.conf import settings
from django.db import models


class SystemLog(models.Model):
    LOG_LEVEL_CHOICES = [
        ("DEBUG", "Debug"),
        ("INFO", "Info"),
        ("WARNING", "Warning"),
        ("ERROR", "Error"),
    ]

    ACTION_TYPE_CHOICES = [
        ("crud_operation", "CRUD Operation"),
        ("authentication", "Authentication"),
        ("security_event", "Security Event"),
        ("system_event", "System Event"),
        ("error", "Error"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    level = models.CharField(max_length=10, choices=LOG_LEVEL_CHOICES)
    action = models.CharField(max_length=100)
    action_type = models.CharField(
        max_length=20, choices=ACTION_TYPE_CHOICES, default="system_event"
    )
    message = models.TextField()
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="system_logs",
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    resource_type = models.CharField(max_length=100, blank=True)
    resource_id = models.CharField(max_length=64, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    stack_trace = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "system_logs"
        verbose_name = "System Log"
        verbose_name_plural = "System Logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level", "created_at"], name="system_logs_level_3c6d1a_idx"),
            models.Index(fields=["action_type", "created_at"], name="system_logs_action__5b0e7f_idx"),
            models.Index(fields=["user", "created_at"], name="system_logs_user_id_9f2b4c_idx"),
            models.Index(fields=["resource_type", "resource_id"], name="system_logs_resourc_e41a8d_idx"),
        ]

    def __str__(self):
        return f"{self.level} - {self.action} - {self.created_at}"
