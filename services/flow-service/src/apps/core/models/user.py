# services/flow-service/src/apps/core/models/user.py
"""
User and Role models.

Users are keyed by their network member id. Panel access and model
permissions are never stored on the user; they follow from the role's
capability set.
"""

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models

from shared.common.mixins import TimestampMixin


class RoleKey(models.TextChoices):
    """Role keys."""
    SYSTEM = 'SYSTEM', 'System'
    NMT = 'NMT', 'Network Management Team'
    FLOW_MANAGER = 'FLOW_MANAGER', 'Flow Manager'
    USER = 'USER', 'User'


class Role(models.Model):
    """A named role; its key determines the user's capabilities."""

    key = models.CharField(
        max_length=32,
        choices=RoleKey.choices,
        unique=True,
    )
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'roles'
        ordering = ['key']

    def __str__(self):
        return self.description or self.get_key_display()


class UserManager(BaseUserManager):
    """Manager creating users against a role key."""

    def create_user(self, id, name, role_key=RoleKey.USER, password=None, **extra_fields):
        if not id:
            raise ValueError('User id is required')

        role, _ = Role.objects.get_or_create(
            key=role_key,
            defaults={'description': RoleKey(role_key).label},
        )
        user = self.model(id=id, name=name, role=role, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, id, name, password=None, **extra_fields):
        return self.create_user(id, name, role_key=RoleKey.SYSTEM, password=password, **extra_fields)


class User(AbstractBaseUser, TimestampMixin):
    """
    Panel user.

    `flight_information_regions` scopes the regions a non-privileged user
    may raise flow measures for.
    """

    id = models.BigIntegerField(primary_key=True)
    name = models.CharField(max_length=255)
    role = models.ForeignKey(
        Role,
        on_delete=models.PROTECT,
        related_name='users',
    )
    flight_information_regions = models.ManyToManyField(
        'core.FlightInformationRegion',
        related_name='users',
        blank=True,
    )
    is_active = models.BooleanField(default=True)

    objects = UserManager()

    USERNAME_FIELD = 'id'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'users'
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.id})"

    @property
    def role_key(self) -> str:
        return self.role.key

    @property
    def capabilities(self) -> frozenset:
        from ..capabilities import capabilities_for

        return capabilities_for(self.role.key)

    @property
    def is_staff(self) -> bool:
        """Whether the user may sign in to the admin panel."""
        from ..capabilities import Capability

        return self.is_active and Capability.ACCESS_PANEL in self.capabilities

    @property
    def is_superuser(self) -> bool:
        return self.is_active and self.role.key == RoleKey.SYSTEM

    def has_perm(self, perm: str, obj=None) -> bool:
        from ..capabilities import capability_for_permission

        if not self.is_active:
            return False
        required = capability_for_permission(perm)
        return required is not None and required in self.capabilities

    def has_perms(self, perm_list, obj=None) -> bool:
        return all(self.has_perm(perm, obj) for perm in perm_list)

    def has_module_perms(self, app_label: str) -> bool:
        return self.is_staff and app_label == 'core'
