# lavanderia/src/authentication/api/routes.py

from fastapi import APIRouter, Depends, Response

from authentication.api.dependencies import (
    SESSION_COOKIE_NAME,
    get_user_use_case,
    require_capability,
    verify_token,
)
from authentication.api.schemas import (
    AdminSetupSchema,
    LoginSchema,
    UserCreateSchema,
    UserUpdateSchema,
)
from authentication.domain.auth_service import JWT_EXP_HOURS
from authentication.domain.roles import Capability
from authentication.use_case.user_use_case import UserUseCase

router = APIRouter()

# =====================================================
# 🔐 AUTENTICAÇÃO
# =====================================================


@router.post("/auth/login", tags=["Autenticação"])
def login(payload: LoginSchema, response: Response, use_case: UserUseCase = Depends(get_user_use_case)):
    token, user = use_case.login(payload.email, payload.senha)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        samesite="lax",
        max_age=JWT_EXP_HOURS * 3600,
    )
    return {"token": token, "usuario": user.to_public_dict()}


@router.post("/auth/logout", tags=["Autenticação"])
def logout(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Sessão encerrada"}


@router.get("/auth/me", tags=["Autenticação"])
def get_me(user: dict = Depends(verify_token)):
    return {"user": user}


@router.post("/auth/create-admin", status_code=201, tags=["Autenticação"])
def create_admin(payload: AdminSetupSchema, use_case: UserUseCase = Depends(get_user_use_case)):
    admin = use_case.create_first_admin(payload.nome, payload.email, payload.senha)
    return {"message": "Usuário admin criado com sucesso", "admin": admin.to_public_dict()}


# =====================================================
# 👤 USUÁRIOS
# =====================================================

manage_users = require_capability(Capability.MANAGE_USERS)


@router.get("/users", tags=["Usuários"])
def list_users(_: dict = Depends(manage_users), use_case: UserUseCase = Depends(get_user_use_case)):
    return [u.to_public_dict() for u in use_case.list_users()]


@router.post("/users", status_code=201, tags=["Usuários"])
def create_user(
    payload: UserCreateSchema,
    _: dict = Depends(manage_users),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    user = use_case.create_user(payload.nome, payload.email, payload.senha, payload.role, payload.ativo)
    return user.to_public_dict()


@router.get("/users/{user_id}", tags=["Usuários"])
def get_user(user_id: int, _: dict = Depends(manage_users), use_case: UserUseCase = Depends(get_user_use_case)):
    return use_case.get_user(user_id).to_public_dict()


@router.put("/users/{user_id}", tags=["Usuários"])
def update_user(
    user_id: int,
    payload: UserUpdateSchema,
    _: dict = Depends(manage_users),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    user = use_case.update_user(user_id, payload.model_dump(exclude_unset=True))
    return user.to_public_dict()


@router.delete("/users/{user_id}", tags=["Usuários"])
def delete_user(
    user_id: int,
    current: dict = Depends(manage_users),
    use_case: UserUseCase = Depends(get_user_use_case),
):
    use_case.delete_user(user_id, requester_id=current["user_id"])
    return {"success": True}
