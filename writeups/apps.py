from django.apps import AppConfig


class WriteupsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "writeups"

    def ready(self):
        """Import signal handlers when app is ready."""
        import writeups.signals  # noqa: F401 - Register post signal handlers
