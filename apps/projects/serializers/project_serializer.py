from django.contrib.auth import get_user_model

from rest_framework import serializers

from apps.projects.models import Project, ProjectTeamMember
from base.serializers import UserBasicSerializer

from .task_serializer import TaskListSerializer

User = get_user_model()


class ProjectTeamMemberSerializer(serializers.ModelSerializer):
    user = UserBasicSerializer(read_only=True)

    class Meta:
        model = ProjectTeamMember
        fields = ["id", "user", "role", "added_at"]
        read_only_fields = fields


class ProjectListSerializer(serializers.ModelSerializer):
    manager = UserBasicSerializer(read_only=True)
    team_lead = UserBasicSerializer(read_only=True)
    team_member_count = serializers.SerializerMethodField()
    duration = serializers.ReadOnlyField()
    days_remaining = serializers.ReadOnlyField()

    class Meta:
        model = Project
        fields = [
            "id",
            "name",
            "description",
            "start_date",
            "end_date",
            "manager",
            "team_lead",
            "status",
            "priority",
            "progress",
            "tags",
            "is_public",
            "team_member_count",
            "duration",
            "days_remaining",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_team_member_count(self, obj) -> int:
        return len(obj.team_members.all())


class ProjectDetailSerializer(ProjectListSerializer):
    team_members = ProjectTeamMemberSerializer(many=True, read_only=True)
    tasks = serializers.SerializerMethodField()
    task_count = serializers.ReadOnlyField()

    class Meta(ProjectListSerializer.Meta):
        fields = ProjectListSerializer.Meta.fields + [
            "budget",
            "team_members",
            "tasks",
            "task_count",
        ]
        read_only_fields = fields

    def get_tasks(self, obj):
        tasks = obj.tasks.select_related("assigned_to", "created_by", "project")
        return TaskListSerializer(tasks, many=True, context=self.context).data


class ProjectCreateSerializer(serializers.ModelSerializer):
    tags = serializers.ListField(
        child=serializers.CharField(max_length=50), required=False
    )

    class Meta:
        model = Project
        fields = [
            "name",
            "description",
            "start_date",
            "end_date",
            "status",
            "priority",
            "progress",
            "tags",
            "budget",
            "is_public",
        ]


class ProjectUpdateSerializer(ProjectCreateSerializer):
    team_lead_id = serializers.PrimaryKeyRelatedField(
        source="team_lead",
        queryset=User.objects.filter(is_active=True),
        allow_null=True,
        required=False,
    )

    class Meta(ProjectCreateSerializer.Meta):
        fields = ProjectCreateSerializer.Meta.fields + ["team_lead_id"]


class AddTeamMemberSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    role = serializers.ChoiceField(
        choices=ProjectTeamMember.ROLE_CHOICES,
        default=ProjectTeamMember.ROLE_TEAM_MEMBER,
    )

    def validate_user_id(self, value):
        try:
            return User.objects.get(pk=value, is_active=True)
        except User.DoesNotExist:
            raise serializers.ValidationError("User not found or inactive.")
