"""
Celery application for scheduled mirror runs.

Beat schedules are left to the deployment; see CELERY_BEAT_SCHEDULE in settings.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("shrike")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
