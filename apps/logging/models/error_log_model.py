import uuid

from django.conf import settings
from django.db import models


class ErrorLog(models.Model):
    SEVERITY_CHOICES = [
        ("low", "Low"),
        ("medium", "Medium"),
        ("high", "High"),
        ("critical", "Critical"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    error_type = models.CharField(max_length=100)
    error_message = models.TextField()
    stack_trace = models.TextField(blank=True)
    severity = models.CharField(
        max_length=10, choices=SEVERITY_CHOICES, default="medium"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="error_logs",
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    request_data = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "error_logs"
        verbose_name = "Error Log"
        verbose_name_plural = "Error Logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["severity", "created_at"], name="error_logs_severit_7d3f0b_idx"),
            models.Index(fields=["error_type", "created_at"], name="error_logs_error_t_2a9c5e_idx"),
        ]

    def __str__(self):
        return f"{self.error_type} - {self.severity}"
