from django.apps import AppConfig


class AlterationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "alterations"
    verbose_name = "Alterations"
