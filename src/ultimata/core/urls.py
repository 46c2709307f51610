"""Account and admin settings URL patterns."""

from django.urls import path

from . import views

auth_urlpatterns = [
    path("register/", views.RegisterView.as_view(), name="register"),
    path("login/", views.LoginView.as_view(), name="login"),
    path("logout/", views.LogoutView.as_view(), name="logout"),
    path("user/", views.CurrentUserView.as_view(), name="user"),
    path("user/profile/", views.ProfileView.as_view(), name="user-profile"),
    path("user/password/", views.PasswordView.as_view(), name="user-password"),
]

admin_urlpatterns = [
    path("users/", views.AdminUserListView.as_view(), name="admin-users"),
    path("users/<uuid:user_id>/role/", views.AdminUserRoleView.as_view(), name="admin-user-role"),
    path("settings/", views.AdminSettingListView.as_view(), name="admin-settings"),
    path("settings/<str:key>/", views.AdminSettingView.as_view(), name="admin-setting"),
]
