from dj_rest_auth.views import PasswordChangeView
from django.urls import path

from .auth_views import LoginView
from .auth_views import PeerLoginView
from .auth_views import PublicTeacherListView
from .auth_views import RegisterView
from .auth_views import TeacherCreateView
from .auth_views import TeacherDeleteView
from .auth_views import TeacherListView
from .auth_views import TeacherLoginView
from .views import UserViewSet

current_user = UserViewSet.as_view({"get": "me"})

# Paths mirror what the SPA already calls under /api/auth/.
urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("teacher/login/", TeacherLoginView.as_view(), name="teacher-login"),
    path("peer/login/", PeerLoginView.as_view(), name="peer-login"),
    path("create-teacher/", TeacherCreateView.as_view(), name="create-teacher"),
    path("teachers/", TeacherListView.as_view(), name="teachers"),
    path("teacher/<int:pk>/", TeacherDeleteView.as_view(), name="teacher-delete"),
    path(
        "public/teachers/",
        PublicTeacherListView.as_view(),
        name="public-teachers",
    ),
    path("me/", current_user, name="me"),
    path("password/change/", PasswordChangeView.as_view(), name="password-change"),
]
