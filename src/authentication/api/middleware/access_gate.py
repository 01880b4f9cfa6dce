# lavanderia/src/authentication/api/middleware/access_gate.py

from fastapi import Request
from fastapi.responses import RedirectResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from authentication.api.dependencies import extract_token
from authentication.domain import access_gate
from authentication.domain.auth_service import AuthService


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Aplica o gate de acesso às páginas; API e estáticos passam direto."""

    def __init__(self, app, auth: AuthService | None = None):
        super().__init__(app)
        self.auth = auth or AuthService()

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not access_gate.is_gated(path):
            return await call_next(request)

        claims = self.auth.claims_or_none(extract_token(request))
        decision = access_gate.decide(path, claims)

        role = claims.get("role") if claims else None
        if decision.passes:
            logger.debug(f"✅ Gate: {path} liberado (role={role})")
            return await call_next(request)

        logger.info(f"↪️ Gate: {path} (role={role}) → {decision.redirect_to}")
        return RedirectResponse(url=decision.redirect_to, status_code=307)
