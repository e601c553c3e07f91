# services/flow-service/src/apps/core/permissions.py
"""
API permission classes resolved through role capabilities.
"""

from typing import Optional

from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.views import APIView

from .capabilities import Capability
from .services import AuthorizationService


class CanAccessPanel(permissions.BasePermission):
    """Allow users whose role grants panel access."""

    def has_permission(self, request: Request, view: APIView) -> bool:
        return AuthorizationService.can_access_panel(request.user)


class HasWriteCapability(CanAccessPanel):
    """
    Reads need panel access; writes need the view's `write_capability`.
    """

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not super().has_permission(request, view):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True

        capability: Optional[Capability] = getattr(view, 'write_capability', None)
        if capability is None:
            return False
        return AuthorizationService.has_capability(request.user, capability)
