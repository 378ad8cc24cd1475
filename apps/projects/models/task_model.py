import math
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Task(models.Model):
    STATUS_PENDING = "pending"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_REVIEW = "review"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_REVIEW, "Review"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PRIORITY_CHOICES = [
        ("low", "Low"),
        ("medium", "Medium"),
        ("high", "High"),
        ("critical", "Critical"),
    ]

    RECURRING_PATTERN_CHOICES = [
        ("none", "None"),
        ("daily", "Daily"),
        ("weekly", "Weekly"),
        ("monthly", "Monthly"),
        ("yearly", "Yearly"),
    ]

    STATUS_PROGRESS = {
        STATUS_PENDING: 0,
        STATUS_IN_PROGRESS: 50,
        STATUS_REVIEW: 75,
        STATUS_COMPLETED: 100,
        STATUS_CANCELLED: 0,
    }

    CLOSED_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    project = models.ForeignKey(
        "projects.Project", on_delete=models.PROTECT, related_name="tasks"
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="assigned_tasks",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_tasks",
    )
    priority = models.CharField(
        max_length=20, choices=PRIORITY_CHOICES, default="medium"
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING
    )
    due_date = models.DateTimeField()
    start_date = models.DateTimeField(null=True, blank=True)
    completed_date = models.DateTimeField(null=True, blank=True)
    estimated_hours = models.DecimalField(
        max_digits=7, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    actual_hours = models.DecimalField(
        max_digits=7, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    tags = models.JSONField(default=list, blank=True)
    dependencies = models.ManyToManyField(
        "self", symmetrical=False, blank=True, related_name="dependents"
    )
    is_recurring = models.BooleanField(default=False)
    recurring_pattern = models.CharField(
        max_length=10, choices=RECURRING_PATTERN_CHOICES, default="none"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tasks"
        verbose_name = "Task"
        verbose_name_plural = "Tasks"
        ordering = ["due_date", "-created_at"]
        indexes = [
            models.Index(fields=["project", "status"], name="tasks_project_1e8c3a_idx"),
            models.Index(fields=["assigned_to", "status"], name="tasks_assigne_6f4d2b_idx"),
            models.Index(fields=["created_by"], name="tasks_created_3a9e7d_idx"),
            models.Index(fields=["due_date"], name="tasks_due_dat_8c5f1e_idx"),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        self.sync_status_timestamps()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"start_date", "completed_date"}
        super().save(*args, **kwargs)

    def sync_status_timestamps(self, now=None):
        """
        Correct the lifecycle timestamps for the current status.

        Entering in_progress stamps ``start_date`` once; completed stamps
        ``completed_date`` once; any other status clears ``completed_date``.
        ``start_date`` is never cleared.
        """
        now = now or timezone.now()
        if self.status == self.STATUS_IN_PROGRESS and self.start_date is None:
            self.start_date = now
        if self.status == self.STATUS_COMPLETED:
            if self.completed_date is None:
                self.completed_date = now
        else:
            self.completed_date = None

    @property
    def progress(self) -> int:
        return self.STATUS_PROGRESS.get(self.status, 0)

    @property
    def is_overdue(self) -> bool:
        return self.due_date < timezone.now() and self.status not in self.CLOSED_STATUSES

    @property
    def days_until_due(self) -> int:
        delta = self.due_date - timezone.now()
        return math.ceil(delta.total_seconds() / 86400)
