"""
Celery application for the storefront.

``DJANGO_SETTINGS_MODULE`` is set before the app is instantiated so the
worker reads Django settings (``CELERY_`` prefix).  Webhook-driven order
materialization runs here, outside the request that received the event.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("storefront")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up tasks.py in every installed app (orders.materialize_paid_session)
app.autodiscover_tasks()
