from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _

USN_PATTERN = r"^[1-9]\d{2}[A-Z]{2}\d{4}$"

usn_validator = RegexValidator(USN_PATTERN, message=_("Invalid USN format"))


class User(AbstractUser):
    """
    Default custom user model for team_sync.

    Teachers and lab instructors sign in with email + password. Peers are
    identified by their university seat number (USN) and never set a usable
    password; their ``username`` mirrors the USN.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        LAB_INSTRUCTOR = "lab_instructor", _("Lab Instructor")
        TEACHER = "teacher", _("Teacher")
        PEER = "peer", _("Peer")

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True, null=True, blank=True)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]
    role = CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.PEER,
        db_index=True,
    )
    usn = CharField(
        _("USN"),
        max_length=10,
        unique=True,
        null=True,
        blank=True,
        validators=[usn_validator],
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        else:
            # Empty strings would collide on the unique index.
            self.email = None
        if not self.usn:
            self.usn = None
        super().save(*args, **kwargs)

    @property
    def is_teacher(self) -> bool:
        return self.role == self.Role.TEACHER

    @property
    def is_lab_instructor(self) -> bool:
        return self.role == self.Role.LAB_INSTRUCTOR

    @property
    def is_peer(self) -> bool:
        return self.role == self.Role.PEER

    def __str__(self) -> str:
        return self.email or self.usn or self.username
