import uuid

from django.conf import settings
from django.db import models


class ProjectTeamMember(models.Model):
    ROLE_TEAM_LEAD = "team_lead"
    ROLE_TEAM_MEMBER = "team_member"

    ROLE_CHOICES = [
        (ROLE_TEAM_LEAD, "Team Lead"),
        (ROLE_TEAM_MEMBER, "Team Member"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="team_members",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="project_memberships",
    )
    role = models.CharField(
        max_length=20, choices=ROLE_CHOICES, default=ROLE_TEAM_MEMBER
    )
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "project_team_members"
        verbose_name = "Project Team Member"
        verbose_name_plural = "Project Team Members"
        ordering = ["added_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "user"], name="unique_project_team_member"
            ),
            models.UniqueConstraint(
                fields=["project"],
                condition=models.Q(role="team_lead"),
                name="unique_project_team_lead",
            ),
        ]

    def __str__(self):
        return f"{self.user.full_name} - {self.project.name} ({self.role})"

    @property
    def is_team_lead(self) -> bool:
        return self.role == self.ROLE_TEAM_LEAD
