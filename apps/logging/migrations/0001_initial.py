import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SystemLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "level",
                    models.CharField(
                        choices=[("DEBUG", "Debug"), ("INFO", "Info"), ("WARNING", "Warning"), ("ERROR", "Error")],
                        max_length=10,
                    ),
                ),
                ("action", models.CharField(max_length=100)),
                (
                    "action_type",
                    models.CharField(
                        choices=[
                            ("crud_operation", "CRUD Operation"),
                            ("authentication", "Authentication"),
                            ("security_event", "Security Event"),
                            ("system_event", "System Event"),
                            ("error", "Error"),
                        ],
                        default="system_event",
                        max_length=20,
                    ),
                ),
                ("message", models.TextField()),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("resource_type", models.CharField(blank=True, max_length=100)),
                ("resource_id", models.CharField(blank=True, max_length=64)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("stack_trace", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="system_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "System Log",
                "verbose_name_plural": "System Logs",
                "db_table": "system_logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["level", "created_at"], name="system_logs_level_3c6d1a_idx"),
                    models.Index(fields=["action_type", "created_at"], name="system_logs_action__5b0e7f_idx"),
                    models.Index(fields=["user", "created_at"], name="system_logs_user_id_9f2b4c_idx"),
                    models.Index(fields=["resource_type", "resource_id"], name="system_logs_resourc_e41a8d_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ErrorLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("error_type", models.CharField(max_length=100)),
                ("error_message", models.TextField()),
                ("stack_trace", models.TextField(blank=True)),
                (
                    "severity",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("critical", "Critical")],
                        default="medium",
                        max_length=10,
                    ),
                ),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("request_data", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="error_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Error Log",
                "verbose_name_plural": "Error Logs",
                "db_table": "error_logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["severity", "created_at"], name="error_logs_severit_7d3f0b_idx"),
                    models.Index(fields=["error_type", "created_at"], name="error_logs_error_t_2a9c5e_idx"),
                ],
            },
        ),
    ]
