# lavanderia/src/authentication/api/dependencies.py

import os

from fastapi import Depends, Request
from loguru import logger

from authentication.domain.auth_service import AuthService
from authentication.domain.roles import Capability, has_capability
from authentication.infrastructure.user_repository import UserRepository
from authentication.use_case.user_use_case import UserUseCase
from database.db_connection import Database
from shared.errors import AuthenticationError, AuthorizationError

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "lavanderia_session")


# =====================================================
# 🔌 Handles da aplicação
# =====================================================
def get_database(request: Request) -> Database:
    return request.app.state.db


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_user_use_case(
    db: Database = Depends(get_database),
    auth: AuthService = Depends(get_auth_service),
) -> UserUseCase:
    return UserUseCase(UserRepository(db), auth)


# =====================================================
# 🔐 Token da requisição
# =====================================================
def extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.replace("Bearer ", "").strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


async def verify_token(request: Request, auth: AuthService = Depends(get_auth_service)) -> dict:
    """
    Valida o JWT localmente.
    Injeta o usuário autenticado em request.state.user.
    """
    token = extract_token(request)
    if not token:
        raise AuthenticationError("Não autorizado")

    payload = auth.decode_token(token)
    for field in ("user_id", "role", "email"):
        if field not in payload:
            raise AuthenticationError(f"Token inválido: campo '{field}' ausente.")

    request.state.user = {
        "user_id": payload["user_id"],
        "email": payload["email"],
        "nome": payload.get("nome"),
        "role": payload["role"],
    }
    return request.state.user


def require_capability(capability: Capability):
    async def dependency(request: Request, user: dict = Depends(verify_token)) -> dict:
        if not has_capability(user["role"], capability):
            logger.warning(
                f"🚫 {user['email']} ({user['role']}) sem permissão {capability.value} em {request.url.path}"
            )
            raise AuthorizationError("Acesso negado")
        return user

    return dependency
