from __future__ import annotations

import getpass

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from team_sync.audit.models import AuditLog
from team_sync.audit.utils import log_action
from team_sync.users.models import User


class Command(BaseCommand):
    help = "Create (or reset) a lab instructor account that can manage teachers"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--email", dest="email", required=True)
        parser.add_argument("--name", dest="name", default="Lab Instructor")
        parser.add_argument(
            "--password",
            dest="password",
            help="Plain-text password (omit to be prompted securely)",
        )

    def handle(self, *args, **options) -> str | None:
        email: str = options["email"].strip().lower()
        pwd: str | None = options.get("password")

        if not pwd:
            pwd = getpass.getpass("Password: ")
            confirm = getpass.getpass("Confirm:  ")
            if pwd != confirm:
                msg = "Passwords do not match."
                raise CommandError(msg)

        user = User.objects.filter(email=email).first()
        if user is not None and user.role not in (
            User.Role.LAB_INSTRUCTOR,
            User.Role.ADMIN,
        ):
            msg = f"{email} already exists with role '{user.role}'."
            raise CommandError(msg)

        created = user is None
        if created:
            user = User(username=email, email=email, role=User.Role.LAB_INSTRUCTOR)
        user.name = options["name"]
        user.set_password(pwd)
        user.save()

        action = (
            AuditLog.Action.LAB_INSTRUCTOR_CREATED
            if created
            else AuditLog.Action.LAB_INSTRUCTOR_RESET
        )
        log_action(
            action,
            message=f"email={email}",
            model_name="User",
            record_id=user.pk,
        )
        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} lab instructor {email}"))
        return None
