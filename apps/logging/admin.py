from django.contrib import admin

from apps.logging.models import ErrorLog, SystemLog


@admin.register(SystemLog)
class SystemLogAdmin(admin.ModelAdmin):
    list_display = ["action", "level", "action_type", "user", "resource_type", "created_at"]
    list_filter = ["level", "action_type", "created_at"]
    search_fields = ["action", "message", "resource_id"]
    readonly_fields = ["created_at"]
    ordering = ["-created_at"]


@admin.register(ErrorLog)
class ErrorLogAdmin(admin.ModelAdmin):
    list_display = ["error_type", "severity", "user", "created_at"]
    list_filter = ["severity", "created_at"]
    search_fields = ["error_type", "error_message"]
    readonly_fields = ["created_at"]
    ordering = ["-created_at"]
