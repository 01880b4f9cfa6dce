# lavanderia/src/authentication/use_case/user_use_case.py

import os

from email_validator import EmailNotValidError, validate_email
from loguru import logger

from authentication.domain.auth_service import BCRYPT_MAX_BYTES, AuthService
from authentication.domain.roles import Role, parse_role
from authentication.entities.user import User
from shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

SENHA_MIN = 6


def validar_email(email: str) -> str:
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Formato de email inválido")
    return email.strip().lower()


def validar_senha(senha: str):
    if len(senha) < SENHA_MIN:
        raise ValidationError(f"Senha deve ter pelo menos {SENHA_MIN} caracteres")
    if len(senha.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Senha deve ter no máximo {BCRYPT_MAX_BYTES} bytes")


def validar_credenciais(nome: str, email: str, senha: str):
    if not nome or not nome.strip() or not email or not senha:
        raise ValidationError("Nome, email e senha são obrigatórios")
    validar_email(email)
    validar_senha(senha)


class UserUseCase:
    def __init__(self, repo, auth: AuthService | None = None):
        self.repo = repo
        self.auth = auth or AuthService()

    def setup_table(self):
        self.repo.create_table()

    # =====================================================
    # CRIAÇÕES
    # =====================================================

    def create_user(self, nome: str, email: str, senha: str, role=Role.SELLER, ativo: bool = True) -> User:
        validar_credenciais(nome, email, senha)
        role = parse_role(role)
        if role is None:
            raise ValidationError("Role inválida")

        email = email.strip().lower()
        if self.repo.find_by_email(email):
            raise ConflictError("Email já cadastrado")

        user = self.repo.create(User(
            nome=nome.strip(),
            email=email,
            senha_hash=self.auth.hash_password(senha),
            role=role,
            ativo=ativo,
        ))
        logger.info(f"👤 Usuário {user.email} ({user.role.value}) criado com ID {user.id}")
        return user

    def create_first_admin(self, nome: str, email: str, senha: str) -> User:
        """Rota de bootstrap: só funciona enquanto não houver ADMIN ativo."""
        if self.repo.exists_active_admin():
            logger.warning(f"🚫 Tentativa de criar admin com administrador já configurado ({email})")
            raise AuthorizationError("Já existe um administrador configurado")
        return self.create_user(nome, email, senha, role=Role.ADMIN)

    def ensure_admin(self, nome: str | None = None, email: str | None = None, senha: str | None = None) -> User:
        """
        Seed do administrador, identificado pelo e-mail.
        Usa ADMIN_NAME / ADMIN_EMAIL / ADMIN_PASSWORD do ambiente quando não informados.
        """
        nome = nome or os.getenv("ADMIN_NAME", "Administrador")
        email = (email or os.getenv("ADMIN_EMAIL", "admin@lavanderia.com")).strip().lower()
        senha = senha or os.getenv("ADMIN_PASSWORD", "admin123")

        existente = self.repo.find_by_email(email)
        if existente:
            logger.info(f"👤 Admin {email} já existe (ID {existente.id})")
            return existente
        return self.create_user(nome, email, senha, role=Role.ADMIN)

    # =====================================================
    # LOGIN
    # =====================================================

    def login(self, email: str, senha: str) -> tuple[str, User]:
        user = self.repo.find_by_email(email or "")
        if not user or not user.ativo or not self.auth.verify_password(senha, user.senha_hash):
            logger.warning(f"🔒 Falha de login para {email}")
            raise AuthenticationError("Credenciais inválidas")
        token = self.auth.generate_token(user.id, user.email, user.nome, user.role.value)
        logger.info(f"🔐 Login de {user.email} ({user.role.value})")
        return token, user

    # =====================================================
    # LISTAGEM / ADMIN
    # =====================================================

    def list_users(self) -> list[User]:
        return self.repo.list_all()

    def get_user(self, user_id: int) -> User:
        user = self.repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("Usuário não encontrado")
        return user

    def update_user(self, user_id: int, alteracoes: dict) -> User:
        """
        alteracoes: somente os campos enviados (nome, email, senha, role, ativo).
        Senha em branco mantém a atual.
        """
        user = self.get_user(user_id)

        if "nome" in alteracoes and alteracoes["nome"] is not None:
            if not alteracoes["nome"].strip():
                raise ValidationError("Nome é obrigatório")
            user.nome = alteracoes["nome"].strip()

        if alteracoes.get("email"):
            email = validar_email(alteracoes["email"])
            if email != user.email:
                outro = self.repo.find_by_email(email)
                if outro and outro.id != user_id:
                    raise ConflictError("Email já cadastrado")
                user.email = email

        senha = alteracoes.get("senha")
        if senha and senha.strip():
            validar_senha(senha)
            user.senha_hash = self.auth.hash_password(senha)

        if alteracoes.get("role") is not None:
            role = parse_role(alteracoes["role"])
            if role is None:
                raise ValidationError("Role inválida")
            user.role = role

        if alteracoes.get("ativo") is not None:
            user.ativo = bool(alteracoes["ativo"])

        user = self.repo.update(user)
        logger.info(f"✏️ Usuário {user.id} atualizado ({', '.join(sorted(alteracoes)) or 'sem alterações'})")
        return user

    def delete_user(self, user_id: int, requester_id: int | None = None):
        if requester_id is not None and user_id == requester_id:
            raise ConflictError("Não é possível excluir o próprio usuário")
        if not self.repo.delete(user_id):
            raise NotFoundError("Usuário não encontrado")
        logger.info(f"🗑️ Usuário {user_id} excluído")
