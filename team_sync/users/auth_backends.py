from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class UsernameOrEmailBackend(ModelBackend):
    """Authenticate with an email, a username or a USN."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None or password is None:
            return None
        usermodel = get_user_model()
        identifier = str(username).strip()
        user = (
            usermodel.objects.filter(email__iexact=identifier).first()
            or usermodel.objects.filter(username__iexact=identifier).first()
            or usermodel.objects.filter(usn__iexact=identifier).first()
        )
        if user is None:
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
