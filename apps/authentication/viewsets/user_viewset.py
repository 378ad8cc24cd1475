import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count, ProtectedError, Q

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authentication.permissions import IsManager, IsSelfOrManager
from apps.authentication.serializers import (
    UserAdminUpdateSerializer,
    UserSerializer,
    UserStatsSerializer,
)
from apps.logging.services import LoggerService, get_client_ip
from base.exceptions import HasDependents, InvariantViolation
from base.serializers import UserBasicSerializer

User = get_user_model()
logger = logging.getLogger(__name__)

TEAM_MEMBER_SEARCH_LIMIT = 20


class UserFilter(filters.FilterSet):
    role = filters.ChoiceFilter(choices=User.ROLE_CHOICES)
    is_active = filters.BooleanFilter()
    search = filters.CharFilter(method="filter_search")

    class Meta:
        model = User
        fields = ["role", "is_active"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(first_name__icontains=value)
            | Q(last_name__icontains=value)
            | Q(email__icontains=value)
            | Q(username__icontains=value)
        )


@extend_schema_view(
    list=extend_schema(
        tags=["Users"],
        operation_id="users_list",
        summary="List Users",
        description="Managers only. Filter by role, is_active and search.",
    ),
    retrieve=extend_schema(
        tags=["Users"],
        operation_id="users_retrieve",
        summary="Get User",
        description="Users can read their own account; managers can read any.",
    ),
    update=extend_schema(
        tags=["Users"],
        operation_id="users_update",
        summary="Update User",
        request=UserAdminUpdateSerializer,
        responses={200: UserSerializer},
    ),
    partial_update=extend_schema(
        tags=["Users"],
        operation_id="users_partial_update",
        summary="Partial Update User",
        request=UserAdminUpdateSerializer,
        responses={200: UserSerializer},
    ),
    destroy=extend_schema(
        tags=["Users"],
        operation_id="users_destroy",
        summary="Delete User",
        description=(
            "Managers only. Refused for the caller's own account and for users "
            "who still manage projects, own tasks, or uploaded attachments or wrote comments."
        ),
    ),
)
class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    User administration, team member search and statistics.
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    filterset_class = UserFilter
    ordering_fields = ["date_joined", "email", "first_name", "last_name"]
    ordering = ["-date_joined"]

    def get_permissions(self):
        if self.action in ["list", "update", "partial_update", "destroy", "stats"]:
            return [permissions.IsAuthenticated(), IsManager()]
        if self.action == "retrieve":
            return [IsSelfOrManager()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):
        if self.action in ["update", "partial_update"]:
            return UserAdminUpdateSerializer
        return UserSerializer

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        LoggerService.log_info(
            action="user_updated",
            user=request.user,
            ip_address=get_client_ip(request),
            details={"user_id": user.id, "fields": sorted(request.data.keys())},
            resource=user,
        )
        return Response(UserSerializer(user).data)

    @transaction.atomic
    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise InvariantViolation("You cannot delete your own account.")

        if instance.managed_projects.exists():
            raise HasDependents(
                "Cannot delete a user who manages projects. Reassign the projects first."
            )

        if instance.assigned_tasks.exists() or instance.created_tasks.exists():
            raise HasDependents(
                "Cannot delete a user with assigned or created tasks. Reassign the tasks first."
            )

        if instance.uploaded_task_attachments.exists() or instance.task_comments.exists():
            raise HasDependents(
                "Cannot delete a user who uploaded attachments or wrote comments."
            )

        user_id = instance.pk
        try:
            instance.delete()
        except ProtectedError:
            raise HasDependents("Cannot delete a user who still owns project records.")

        LoggerService.log_info(
            action="user_deleted",
            user=self.request.user,
            ip_address=get_client_ip(self.request),
            details={"user_id": user_id},
        )

    @extend_schema(
        tags=["Users"],
        operation_id="users_me",
        summary="Get Current User",
        responses={200: UserSerializer},
    )
    @action(detail=False, methods=["get"], url_path="me")
    def me(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        tags=["Users"],
        operation_id="users_team_members",
        summary="Search Team Member Candidates",
        description=(
            f"Active users matching `search`, excluding members of "
            f"`exclude_project`. At most {TEAM_MEMBER_SEARCH_LIMIT} results."
        ),
        parameters=[
            OpenApiParameter(name="search", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="exclude_project", type=str, location=OpenApiParameter.QUERY, required=False),
        ],
        responses={200: UserBasicSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="team-members")
    def team_members(self, request):
        queryset = User.objects.active()

        search = request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )

        exclude_project = request.query_params.get("exclude_project")
        if exclude_project:
            queryset = queryset.exclude(pk__in=self._project_user_ids(exclude_project))

        queryset = queryset.order_by("first_name", "last_name")[:TEAM_MEMBER_SEARCH_LIMIT]
        return Response(UserBasicSerializer(queryset, many=True).data)

    @extend_schema(
        tags=["Users"],
        operation_id="users_stats",
        summary="User Statistics",
        description="Managers only. Counts by role and the five most recent users.",
        responses={200: UserStatsSerializer},
    )
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        by_role = (
            User.objects.values("role")
            .annotate(count=Count("id"), active=Count("id", filter=Q(is_active=True)))
            .order_by("role")
        )
        data = {
            "total_users": User.objects.count(),
            "active_users": User.objects.active().count(),
            "by_role": list(by_role),
            "recent_users": User.objects.order_by("-date_joined")[:5],
        }
        return Response(UserStatsSerializer(data).data)

    @staticmethod
    def _project_user_ids(project_id):
        from apps.projects.models import Project

        try:
            project = Project.objects.get(pk=project_id)
        except (Project.DoesNotExist, DjangoValidationError):
            return set()

        user_ids = set(project.team_members.values_list("user_id", flat=True))
        user_ids.add(project.manager_id)
        return user_ids
