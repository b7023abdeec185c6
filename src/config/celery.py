"""
Celery application for the fulfillment engine.

DJANGO_SETTINGS_MODULE is set before the app is created so Celery reads
the Django settings (``CELERY_`` prefix), including the beat schedule.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("harvest")

app.config_from_object("django.conf:settings", namespace="CELERY")

# tasks.py of every installed app
app.autodiscover_tasks()
