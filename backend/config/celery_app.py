# config/celery_app.py
import os
from celery import Celery
import logging

logger = logging.getLogger(__name__)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
app = Celery('business-showcase')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
