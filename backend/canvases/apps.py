from django.apps import AppConfig


class CanvasesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "canvases"
