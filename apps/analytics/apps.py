from django.apps import AppConfig  # type: ignore


class AnalyticsConfig(AppConfig):
    name = "apps.analytics"
    label = "analytics"

    def ready(self) -> None:
        from .handlers import register_handlers

        register_handlers()
