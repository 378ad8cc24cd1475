"""
Shared serializers for nested representation across apps.
"""
from rest_framework import serializers


class UserBasicSerializer(serializers.ModelSerializer):
    """Basic user info embedded in projects, tasks, attachments and comments."""

    full_name = serializers.ReadOnlyField()

    class Meta:
        from apps.authentication.models import User

        model = User
        fields = ["id", "email", "username", "first_name", "last_name", "full_name", "role"]
        read_only_fields = fields


class ProjectBasicSerializer(serializers.ModelSerializer):
    """Basic project info embedded in tasks."""

    class Meta:
        from apps.projects.models import Project

        model = Project
        fields = ["id", "name", "status", "priority"]
        read_only_fields = fields
