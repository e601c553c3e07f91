# services/flow-service/src/apps/core/capabilities.py
"""
Role capability resolution.

Every authorization decision (admin panel access, region scoping, model
permissions, API permission classes) resolves the user's role through
`capabilities_for` rather than checking role keys directly.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from .models.user import RoleKey


class Capability(str, Enum):
    ACCESS_PANEL = 'access_panel'
    MANAGE_ALL_REGIONS = 'manage_all_regions'
    MANAGE_FLOW_MEASURES = 'manage_flow_measures'
    MANAGE_EVENTS = 'manage_events'
    MANAGE_REGIONS = 'manage_regions'
    MANAGE_USERS = 'manage_users'


ALL_CAPABILITIES: FrozenSet[Capability] = frozenset(Capability)

ROLE_CAPABILITIES: Dict[str, FrozenSet[Capability]] = {
    RoleKey.SYSTEM.value: ALL_CAPABILITIES,
    RoleKey.NMT.value: ALL_CAPABILITIES,
    RoleKey.FLOW_MANAGER.value: frozenset({
        Capability.ACCESS_PANEL,
        Capability.MANAGE_FLOW_MEASURES,
    }),
    RoleKey.USER.value: frozenset(),
}

# Django model name -> capability needed to change it through the admin.
MODEL_CAPABILITIES: Dict[str, Capability] = {
    'flowmeasure': Capability.MANAGE_FLOW_MEASURES,
    'event': Capability.MANAGE_EVENTS,
    'flightinformationregion': Capability.MANAGE_REGIONS,
    'discordtag': Capability.MANAGE_REGIONS,
    'discordnotification': Capability.MANAGE_FLOW_MEASURES,
    'user': Capability.MANAGE_USERS,
    'role': Capability.MANAGE_USERS,
}


def capabilities_for(role_key: Optional[str]) -> FrozenSet[Capability]:
    """Return the capability set granted to a role key."""
    if role_key is None:
        return frozenset()
    return ROLE_CAPABILITIES.get(str(role_key), frozenset())


def capability_for_permission(perm: str) -> Optional[Capability]:
    """
    Map a Django permission string to the capability that grants it.

    Viewing only needs panel access, except for users and roles; every
    other action needs the model's management capability.
    """
    app_label, _, codename = perm.partition('.')
    if app_label != 'core' or '_' not in codename:
        return None

    action, _, model_name = codename.partition('_')
    capability = MODEL_CAPABILITIES.get(model_name)
    if capability is None:
        return None
    if action == 'view' and capability != Capability.MANAGE_USERS:
        return Capability.ACCESS_PANEL
    return capability
