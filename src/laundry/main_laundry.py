# ==========================================================
# 📦 src/laundry/main_laundry.py
# ==========================================================

import argparse
import os
import sys

import uvicorn
from dotenv import load_dotenv
from loguru import logger

# .env carregado antes dos módulos que leem o ambiente na importação
load_dotenv()

from authentication.infrastructure.user_repository import UserRepository
from authentication.use_case.user_use_case import UserUseCase
from database.db_connection import Database, check_db_connection
from laundry.infrastructure.customer_repository import CustomerRepository
from laundry.infrastructure.order_repository import OrderRepository
from laundry.infrastructure.service_repository import ServiceRepository
from laundry.infrastructure.transfer_repository import TransferRepository
from laundry.use_case.service_use_case import ServiceUseCase


def criar_tabelas(db: Database):
    # Ordem respeita as chaves estrangeiras de pedido e pedido_item
    UserRepository(db).create_table()
    CustomerRepository(db).create_table()
    ServiceRepository(db).create_table()
    OrderRepository(db).create_table()
    TransferRepository(db).create_table()
    logger.success("🧱 Tabelas da lavanderia prontas.")


def main():
    logger.remove()
    logger.add(sys.stdout, level=os.getenv("LOG_LEVEL", "INFO"), colorize=True)

    parser = argparse.ArgumentParser(description="Lavanderia - inicialização e servidor")
    parser.add_argument("--action", required=True, choices=["init", "seed_services", "serve"],
                        help="Ação a ser executada.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    if args.action == "serve":
        uvicorn.run("laundry.api.laundry_api:app", host=args.host, port=args.port)
        return

    db = Database()
    try:
        if not check_db_connection(db):
            sys.exit(1)

        services = ServiceUseCase(ServiceRepository(db))
        if args.action == "init":
            criar_tabelas(db)
            admin = UserUseCase(UserRepository(db)).ensure_admin()
            logger.info(f"👤 Administrador: {admin.email}")
            services.seed_services()

        elif args.action == "seed_services":
            criados = services.seed_services()
            logger.info(f"🧼 {len(criados)} serviço(s) criado(s).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
