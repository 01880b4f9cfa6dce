# lavanderia/src/authentication/domain/access_gate.py

"""
Gate de acesso às páginas.

Decide, por caminho requisitado e claims da sessão, se a requisição segue,
vai para o login ou é redirecionada para o painel do papel.
"""

import re
from dataclasses import dataclass
from typing import Optional

from authentication.domain.roles import Capability, Role, has_capability, landing_page, parse_role

LOGIN_PATH = "/auth/login"
DASHBOARD_PATH = "/dashboard"
ADMIN_PREFIX = "/admin"
SELLER_PREFIX = "/seller"

# Caminhos fora do gate (API e estáticos), aplicado antes da decisão
GATE_MATCHER = re.compile(r"^/(?!api|static|favicon\.ico|public)")


@dataclass(frozen=True)
class GateDecision:
    redirect_to: Optional[str] = None

    @property
    def passes(self) -> bool:
        return self.redirect_to is None


PASS = GateDecision()


def redirect(path: str) -> GateDecision:
    return GateDecision(redirect_to=path)


def is_gated(path: str) -> bool:
    return bool(GATE_MATCHER.match(path))


def is_public(path: str) -> bool:
    return path.startswith("/auth") or path.startswith("/api/auth") or path == "/"


def decide(path: str, claims: Optional[dict]) -> GateDecision:
    """
    claims: payload decodificado do token de sessão, ou None se não houver sessão.
    """
    if is_public(path):
        return PASS

    if not claims:
        return redirect(LOGIN_PATH)

    role = parse_role(claims.get("role"))

    if role is Role.ADMIN:
        if path == DASHBOARD_PATH:
            return redirect(landing_page(role))
        return PASS

    if role is Role.SELLER:
        if path.startswith(ADMIN_PREFIX) and not has_capability(role, Capability.ADMIN_AREA):
            return redirect(landing_page(role))
        if path == DASHBOARD_PATH:
            return redirect(landing_page(role))
        if path.startswith(SELLER_PREFIX):
            return PASS

    # Fallback permissivo: SELLER fora de /admin e /seller, ou role desconhecida.
    # TODO: confirmar a política para caminhos fora das áreas antes de trocar por negação
    return PASS
