from django.apps import AppConfig


class AuditConfig(AppConfig):
    """AppConfig for the service edit audit trail."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "audit"
    verbose_name = "Audit"
