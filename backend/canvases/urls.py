from django.urls import path
from .views import CanvasView

urlpatterns = [
    path("<str:kind>/", CanvasView.as_view(), name="canvas"),
]
