from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models.signals import pre_save
from django.dispatch import receiver


@receiver(pre_save, sender=get_user_model())
def promote_superuser_role(sender, instance, **kwargs):
    """Superusers created through ``createsuperuser`` carry the admin role."""

    if instance.is_superuser and instance.role == sender.Role.PEER:
        instance.role = sender.Role.ADMIN
