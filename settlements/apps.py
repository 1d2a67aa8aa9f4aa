from django.apps import AppConfig


class SettlementsConfig(AppConfig):
    """AppConfig for the settlements app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "settlements"
    verbose_name = "Settlements"
