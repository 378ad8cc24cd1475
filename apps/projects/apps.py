from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.projects"

    def ready(self):
        """
        Build the process-wide attachment storage from settings once Django
        has loaded its storages.
        """
        from apps.projects.services.attachment_storage import configure_attachment_storage

        configure_attachment_storage()
