from django.contrib import admin

from apps.projects.models import (
    Project,
    ProjectTeamMember,
    Task,
    TaskAttachment,
    TaskComment,
)


class ProjectTeamMemberInline(admin.TabularInline):
    model = ProjectTeamMember
    extra = 0
    readonly_fields = ["added_at"]


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["name", "manager", "team_lead", "status", "priority", "end_date"]
    list_filter = ["status", "priority", "is_public"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [ProjectTeamMemberInline]
    ordering = ["-created_at"]


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ["title", "project", "assigned_to", "status", "priority", "due_date"]
    list_filter = ["status", "priority", "is_recurring"]
    search_fields = ["title", "description"]
    readonly_fields = ["start_date", "completed_date", "created_at", "updated_at"]
    ordering = ["due_date"]


@admin.register(TaskAttachment)
class TaskAttachmentAdmin(admin.ModelAdmin):
    list_display = ["original_name", "task", "mime_type", "file_size", "uploaded_at"]
    search_fields = ["original_name", "filename"]
    readonly_fields = ["uploaded_at"]


@admin.register(TaskComment)
class TaskCommentAdmin(admin.ModelAdmin):
    list_display = ["task", "author", "created_at"]
    search_fields = ["content"]
    readonly_fields = ["created_at"]
