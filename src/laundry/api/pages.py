# ==========================================================
# 📦 src/laundry/api/pages.py
# ==========================================================
# Páginas protegidas pelo gate. Devolvem só o descritor da página;
# a renderização fica com o front-end.

from fastapi import APIRouter, Request

from authentication.api.dependencies import extract_token
from authentication.domain.roles import landing_page

router = APIRouter(tags=["Páginas"])


def _sessao(request: Request) -> dict | None:
    return request.app.state.auth.claims_or_none(extract_token(request))


@router.get("/")
def home(request: Request):
    claims = _sessao(request)
    destino = landing_page(claims.get("role")) if claims else "/auth/login"
    return {"page": "home", "title": "Lavanderia", "next": destino}


@router.get("/auth/login")
def login_page():
    return {"page": "login", "title": "Entrar", "action": "/api/auth/login"}


@router.get("/dashboard")
def dashboard(request: Request):
    claims = _sessao(request) or {}
    return {"page": "dashboard", "title": "Painel", "next": landing_page(claims.get("role"))}


@router.get("/admin")
def admin_page():
    return {"page": "admin", "title": "Administração", "stats": "/api/admin/stats"}


@router.get("/seller")
def seller_page():
    return {"page": "seller", "title": "Vendedor", "stats": "/api/seller/stats"}
