#lavanderia/src/shared/errors.py

"""Exceções de domínio da Lavanderia e seu mapeamento para respostas HTTP."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class LavanderiaError(Exception):
    """Base de todos os erros de domínio."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(LavanderiaError):
    """Entrada ausente ou malformada (nome vazio, preço negativo, quantidade < 1...)."""

    status_code = 400


class NotFoundError(LavanderiaError):
    """Entidade referenciada ausente ou inativa."""

    status_code = 404


class ConflictError(LavanderiaError):
    """Violação de unicidade ou registro em uso."""

    status_code = 409


class AuthenticationError(LavanderiaError):
    """Sem token, token inválido ou credenciais incorretas."""

    status_code = 401


class AuthorizationError(LavanderiaError):
    """Papel sem a capacidade exigida."""

    status_code = 403


class InternalError(LavanderiaError):
    """Falha de persistência ou conexão."""

    status_code = 500


def error_body(exc: LavanderiaError) -> dict:
    return {"error": exc.message, "error_type": type(exc).__name__}


def register_error_handlers(app: FastAPI):
    @app.exception_handler(LavanderiaError)
    async def lavanderia_error_handler(request: Request, exc: LavanderiaError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"💥 {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        primeiro = exc.errors()[0] if exc.errors() else {}
        campo = ".".join(str(p) for p in primeiro.get("loc", ()) if p != "body")
        mensagem = f"Dados inválidos: {campo} ({primeiro.get('msg', 'valor inválido')})" if campo else "Dados inválidos"
        logger.warning(f"⚠️ {request.method} {request.url.path}: {mensagem}")
        return JSONResponse(status_code=400, content=error_body(ValidationError(mensagem)))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"❌ Erro inesperado em {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_body(InternalError("Erro interno do servidor")))
