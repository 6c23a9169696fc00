import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("cebugo")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Dashboard statistics - every 5 minutes, matching the cache lifetime
    "refresh-dashboard-stats": {
        "task": "analytics.refresh_dashboard_stats",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
}
