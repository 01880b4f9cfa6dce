# lavanderia/src/authentication/domain/roles.py

"""
Papéis e capacidades.
Toda checagem de papel (gate de páginas e rotas da API) passa por has_capability.
"""

from enum import Enum
from typing import Optional


class Role(str, Enum):
    ADMIN = "ADMIN"
    SELLER = "SELLER"


class Capability(str, Enum):
    ADMIN_AREA = "admin_area"
    SELLER_AREA = "seller_area"
    MANAGE_USERS = "manage_users"
    MANAGE_SERVICES = "manage_services"
    MANAGE_TRANSFERS = "manage_transfers"
    VIEW_REPORTS = "view_reports"
    VIEW_ADMIN_STATS = "view_admin_stats"
    VIEW_SELLER_STATS = "view_seller_stats"
    MANAGE_CUSTOMERS = "manage_customers"
    MANAGE_ORDERS = "manage_orders"
    VIEW_SERVICES = "view_services"


CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.SELLER: frozenset({
        Capability.SELLER_AREA,
        Capability.VIEW_SELLER_STATS,
        Capability.MANAGE_CUSTOMERS,
        Capability.MANAGE_ORDERS,
        Capability.VIEW_SERVICES,
    }),
}

LANDING_PAGES = {
    Role.ADMIN: "/admin",
    Role.SELLER: "/seller",
}


def parse_role(value) -> Optional[Role]:
    """Converte a claim de role do token; valores desconhecidos viram None."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).upper())
    except ValueError:
        return None


def has_capability(role, capability: Capability) -> bool:
    role = parse_role(role)
    if role is None:
        return False
    return capability in CAPABILITIES[role]


def landing_page(role) -> str:
    role = parse_role(role)
    return LANDING_PAGES.get(role, "/auth/login")
