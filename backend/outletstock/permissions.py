"""
Role and Endpoint Policy Definitions

All authorization rules live here so they can be audited in one place:
- which roles exist and which outlet type each outlet role belongs to
- how far each role may reach across outlets (any outlet vs. its own)
- which roles may call each protected endpoint

Routes reference a policy by name via @require_policy; nothing else in the
codebase compares role strings directly.
"""

from __future__ import annotations

from dataclasses import dataclass


# =============================================================================
# ROLES & OUTLET TYPES
# =============================================================================

class Role:
    OWNER = "OWNER"
    PURCHASING = "PURCHASING"
    OUTLET_CAFE = "OUTLET_CAFE"
    OUTLET_RESTAURANT = "OUTLET_RESTAURANT"
    OUTLET_MINI_MARKET = "OUTLET_MINI_MARKET"


class OutletType:
    CAFE = "CAFE"
    RESTAURANT = "RESTAURANT"
    MINI_MARKET = "MINI_MARKET"


ALL_ROLES = frozenset({
    Role.OWNER,
    Role.PURCHASING,
    Role.OUTLET_CAFE,
    Role.OUTLET_RESTAURANT,
    Role.OUTLET_MINI_MARKET,
})

OUTLET_ROLES = frozenset({
    Role.OUTLET_CAFE,
    Role.OUTLET_RESTAURANT,
    Role.OUTLET_MINI_MARKET,
})

ALL_OUTLET_TYPES = frozenset({OutletType.CAFE, OutletType.RESTAURANT, OutletType.MINI_MARKET})

# Outlet staff roles are tied to one outlet type
ROLE_OUTLET_TYPE = {
    Role.OUTLET_CAFE: OutletType.CAFE,
    Role.OUTLET_RESTAURANT: OutletType.RESTAURANT,
    Role.OUTLET_MINI_MARKET: OutletType.MINI_MARKET,
}


# =============================================================================
# OUTLET SCOPE
# =============================================================================

SCOPE_ANY = "any"   # may name any outlet explicitly
SCOPE_OWN = "own"   # always pinned to the outlet in the credential

ROLE_OUTLET_SCOPE = {
    Role.OWNER: SCOPE_ANY,
    Role.PURCHASING: SCOPE_OWN,
    Role.OUTLET_CAFE: SCOPE_OWN,
    Role.OUTLET_RESTAURANT: SCOPE_OWN,
    Role.OUTLET_MINI_MARKET: SCOPE_OWN,
}


# =============================================================================
# ENDPOINT POLICIES
# =============================================================================

@dataclass(frozen=True)
class EndpointPolicy:
    allowed_roles: frozenset


OWNER_ONLY = frozenset({Role.OWNER})
OWNER_AND_PURCHASING = frozenset({Role.OWNER, Role.PURCHASING})
OWNER_AND_OUTLETS = frozenset({Role.OWNER}) | OUTLET_ROLES

ENDPOINT_POLICIES = {
    "auth.me": EndpointPolicy(ALL_ROLES),
    "inventory.list": EndpointPolicy(ALL_ROLES),
    "inventory.record": EndpointPolicy(OWNER_AND_PURCHASING),
    "purchases.list": EndpointPolicy(ALL_ROLES),
    "purchases.record": EndpointPolicy(OWNER_AND_PURCHASING),
    "sales.list": EndpointPolicy(ALL_ROLES),
    "sales.record": EndpointPolicy(OWNER_AND_OUTLETS),
    "waste.list": EndpointPolicy(ALL_ROLES),
    "waste.record": EndpointPolicy(OWNER_AND_OUTLETS),
    "daily_closing.list": EndpointPolicy(ALL_ROLES),
    "daily_closing.record": EndpointPolicy(OWNER_AND_OUTLETS),
    "reports.inventory": EndpointPolicy(ALL_ROLES),
    "reports.sales": EndpointPolicy(ALL_ROLES),
    "reports.daily_summary": EndpointPolicy(OWNER_ONLY),
    "reports.dashboard_stats": EndpointPolicy(OWNER_ONLY),
    "products.list": EndpointPolicy(ALL_ROLES),
    "outlets.list": EndpointPolicy(ALL_ROLES),
}


def get_policy(name: str) -> EndpointPolicy:
    """Look up a policy; unknown names are a programming error."""
    try:
        return ENDPOINT_POLICIES[name]
    except KeyError:
        raise KeyError(f"No endpoint policy named {name!r}") from None


def is_role_allowed(policy_name: str, role: str) -> bool:
    return role in get_policy(policy_name).allowed_roles


def outlet_scope(role: str) -> str:
    # Unknown roles get the narrowest scope
    return ROLE_OUTLET_SCOPE.get(role, SCOPE_OWN)


def effective_outlet_id(role: str, own_outlet_id: int | None, requested_outlet_id: int | None) -> int | None:
    """
    Outlet filter actually applied to a query.

    SCOPE_ANY callers get what they asked for (None = all outlets).
    SCOPE_OWN callers get their credential's outlet no matter what they
    asked for; a caller with no affiliation (purchasing) gets no filter.
    """
    if outlet_scope(role) == SCOPE_ANY:
        return requested_outlet_id
    return own_outlet_id
