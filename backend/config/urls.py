# config/urls.py
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView

from businesses.views import DashboardView

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/users/", include("users.urls")),
    path("api/businesses/manage/canvases/", include("canvases.urls")),
    path("api/businesses/", include("businesses.urls")),
    path("api/dashboard/", DashboardView.as_view(), name="dashboard"),
]
