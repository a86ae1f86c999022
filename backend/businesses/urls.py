# backend/businesses/urls.py
from django.urls import path
from .views import BusinessListView, BusinessProfileView, BusinessManageView

urlpatterns = [
    path("", BusinessListView.as_view(), name="business-list"),
    path("manage/", BusinessManageView.as_view(), name="business-manage"),
    path("<int:pk>/", BusinessProfileView.as_view(), name="business-profile"),
]
