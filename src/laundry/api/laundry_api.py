# ==========================================================
# 📦 src/laundry/api/laundry_api.py
# ==========================================================

from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

load_dotenv()

from authentication.api.middleware.access_gate import AccessGateMiddleware
from authentication.api.routes import router as auth_router
from authentication.domain.auth_service import AuthService
from database.db_connection import Database
from laundry.api.pages import router as pages_router
from laundry.api.routes import router as laundry_router
from shared.errors import register_error_handlers


def create_app(db: Database | None = None, auth: AuthService | None = None) -> FastAPI:
    """
    db e auth podem ser injetados (testes); por padrão usam as variáveis de ambiente.
    O pool só abre conexões na primeira consulta.
    """
    auth = auth or AuthService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🧺 Lavanderia API iniciando...")
        yield
        app.state.db.close()
        logger.info("🛑 Lavanderia API encerrada.")

    app = FastAPI(
        title="Lavanderia API",
        description="Gestão de lavanderia: clientes, serviços, pedidos, transferências e relatórios",
        version="1.0.0",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        lifespan=lifespan,
    )
    app.state.db = db or Database()
    app.state.auth = auth

    # ==========================================================
    # 🌍 CORS + gate de páginas
    # ==========================================================
    app.add_middleware(AccessGateMiddleware, auth=auth)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # ==========================================================
    # 🔀 Rotas principais
    # ==========================================================
    app.include_router(auth_router, prefix="/api")
    app.include_router(laundry_router, prefix="/api")
    app.include_router(pages_router)
    return app


app = create_app()

# ==========================================================
# 🚀 Execução standalone (dev)
# ==========================================================
if __name__ == "__main__":
    uvicorn.run("laundry.api.laundry_api:app", host="0.0.0.0", port=8000)
