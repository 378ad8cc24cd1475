from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    ROLE_MANAGER = "manager"
    ROLE_TEAM_LEAD = "team_lead"
    ROLE_TEAM_MEMBER = "team_member"

    ROLE_CHOICES = [
        (ROLE_MANAGER, "Manager"),
        (ROLE_TEAM_LEAD, "Team Lead"),
        (ROLE_TEAM_MEMBER, "Team Member"),
    ]

    email = models.EmailField(unique=True, max_length=255)
    username = models.CharField(
        max_length=150,
        unique=True,
        validators=[
            RegexValidator(
                regex=r"^[\w.@+-]+$",
                message="Username may only contain letters, numbers and @/./+/-/_ characters.",
            )
        ],
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    role = models.CharField(
        max_length=20, choices=ROLE_CHOICES, default=ROLE_TEAM_MEMBER
    )
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username", "first_name", "last_name"]

    class Meta:
        db_table = "auth_users"
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role", "is_active"], name="auth_users_role_8a1f2e_idx"),
        ]

    def __str__(self):
        return self.email

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_manager(self) -> bool:
        return self.role == self.ROLE_MANAGER

    def get_full_name(self):
        return self.full_name

    def get_short_name(self):
        return self.first_name
