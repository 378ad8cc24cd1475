from django.urls import include, path

from rest_framework.routers import DefaultRouter

from .viewsets import (
    ProjectTeamViewSet,
    ProjectViewSet,
    TaskAttachmentViewSet,
    TaskCommentViewSet,
    TaskViewSet,
)

router = DefaultRouter()
router.register(r"projects", ProjectViewSet, basename="project")
router.register(r"tasks", TaskViewSet, basename="task")

urlpatterns = [
    path("", include(router.urls)),
    # Project team members endpoints
    path(
        "projects/<str:project_pk>/team/",
        ProjectTeamViewSet.as_view({"get": "list", "post": "create"}),
        name="project-team-list",
    ),
    path(
        "projects/<str:project_pk>/team/<int:user_pk>/",
        ProjectTeamViewSet.as_view({"delete": "destroy"}),
        name="project-team-detail",
    ),
    # Task attachments endpoints
    path(
        "tasks/<str:task_pk>/attachments/",
        TaskAttachmentViewSet.as_view({"get": "list", "post": "create"}),
        name="task-attachment-list",
    ),
    path(
        "tasks/<str:task_pk>/attachments/<str:pk>/",
        TaskAttachmentViewSet.as_view({"delete": "destroy"}),
        name="task-attachment-detail",
    ),
    # Task comments endpoints
    path(
        "tasks/<str:task_pk>/comments/",
        TaskCommentViewSet.as_view({"get": "list", "post": "create"}),
        name="task-comment-list",
    ),
]
