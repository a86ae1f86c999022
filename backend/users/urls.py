from django.urls import path
from .views import (
    RegisterView,
    LoginView,
    LogoutView,
    SessionView,
    UserProfileView,
    ForgotPasswordView,
    ResetPasswordView,
    UserListView,
    UserDeleteView,
    AdminInviteView,
)

urlpatterns = [
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('session/', SessionView.as_view(), name='session'),
    path('me/', UserProfileView.as_view(), name='user-profile'),
    path('password/forgot/', ForgotPasswordView.as_view(), name='forgot-password'),
    path('password/reset/', ResetPasswordView.as_view(), name='reset-password'),

    # Admin user management
    path('', UserListView.as_view(), name='user-list'),
    path('<int:pk>/', UserDeleteView.as_view(), name='user-delete'),
    path('invites/', AdminInviteView.as_view(), name='admin-invite'),
]
