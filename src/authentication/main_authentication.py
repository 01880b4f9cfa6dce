# lavanderia/src/authentication/main_authentication.py

import argparse
import os
import sys

from dotenv import load_dotenv
from loguru import logger

# .env carregado antes dos módulos que leem o ambiente na importação
load_dotenv()

from authentication.domain.roles import Role
from authentication.infrastructure.user_repository import UserRepository
from authentication.use_case.user_use_case import UserUseCase
from database.db_connection import Database
from shared.errors import LavanderiaError


def main():
    logger.remove()
    logger.add(sys.stdout, level=os.getenv("LOG_LEVEL", "INFO"), colorize=True)

    parser = argparse.ArgumentParser(description="Módulo de Autenticação - Lavanderia")

    parser.add_argument("--action", required=True,
                        choices=["init", "create_admin", "create_user", "login"],
                        help="Ação a ser executada.")

    parser.add_argument("--nome", help="Nome do usuário")
    parser.add_argument("--email", help="E-mail do usuário")
    parser.add_argument("--senha", help="Senha do usuário")
    parser.add_argument("--role", choices=[r.value for r in Role], default=Role.SELLER.value,
                        help="Papel do usuário a criar")

    args = parser.parse_args()
    db = Database()
    user_uc = UserUseCase(UserRepository(db))

    try:
        if args.action == "init":
            print("🚀 Inicializando estrutura de autenticação...")
            user_uc.setup_table()
            admin = user_uc.ensure_admin(args.nome, args.email, args.senha)
            print(f"👤 Administrador {admin.email} pronto com ID: {admin.id}")

        elif args.action == "create_admin":
            if not all([args.nome, args.email, args.senha]):
                print("❌ Faltam parâmetros obrigatórios: --nome, --email, --senha")
                return
            user = user_uc.create_first_admin(args.nome, args.email, args.senha)
            print(f"✅ Administrador '{user.nome}' criado com ID: {user.id}")

        elif args.action == "create_user":
            if not all([args.nome, args.email, args.senha]):
                print("❌ Faltam parâmetros obrigatórios: --nome, --email, --senha")
                return
            user = user_uc.create_user(args.nome, args.email, args.senha, role=args.role)
            print(f"✅ Usuário '{user.nome}' ({user.role.value}) criado com ID: {user.id}")

        elif args.action == "login":
            if not all([args.email, args.senha]):
                print("❌ Faltam parâmetros obrigatórios: --email, --senha")
                return
            token, user = user_uc.login(args.email, args.senha)
            print(f"🔐 Login bem-sucedido ({user.role.value}). Token JWT: {token}")

    except LavanderiaError as e:
        print(f"❌ {e.message}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
