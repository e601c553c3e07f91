"""
Authorization Service.

Role-based visibility and region scoping, resolved through the role's
capability set on every call.
"""
import logging

from django.db.models import QuerySet

from ..capabilities import Capability
from ..models import FlightInformationRegion, FlowMeasure, User

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Service answering what a user may see and manage."""

    @staticmethod
    def has_capability(user: User, capability: Capability) -> bool:
        if user is None or not user.is_authenticated or not user.is_active:
            return False
        return capability in user.capabilities

    @staticmethod
    def can_access_panel(user: User) -> bool:
        """True iff the user's role grants admin panel access."""
        return AuthorizationService.has_capability(user, Capability.ACCESS_PANEL)

    @staticmethod
    def visible_regions(user: User) -> QuerySet[FlightInformationRegion]:
        """
        Regions the user may raise flow measures for.

        Privileged roles see every region; everyone else sees only the
        regions assigned to them.
        """
        if AuthorizationService.has_capability(user, Capability.MANAGE_ALL_REGIONS):
            return FlightInformationRegion.objects.all()
        if user is None or not user.is_authenticated:
            return FlightInformationRegion.objects.none()
        return user.flight_information_regions.all()

    @staticmethod
    def can_manage_region(user: User, region: FlightInformationRegion) -> bool:
        if not AuthorizationService.has_capability(user, Capability.MANAGE_FLOW_MEASURES):
            return False
        return AuthorizationService.visible_regions(user).filter(pk=region.pk).exists()

    @staticmethod
    def can_edit_flow_measure(user: User, measure: FlowMeasure) -> bool:
        return AuthorizationService.can_manage_region(user, measure.flight_information_region)
