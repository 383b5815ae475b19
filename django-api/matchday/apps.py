from django.apps import AppConfig


class MatchdayConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "matchday"
