from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """AppConfig for service listings."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
    verbose_name = "Catalog"
