# lavanderia/src/authentication/domain/auth_service.py

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from loguru import logger

from shared.errors import AuthenticationError, ValidationError

# ==============================
# 🔐 Configurações JWT centralizadas
# ==============================
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "lavanderia-secret-key")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXP_HOURS = int(os.getenv("JWT_EXP_HOURS", 8))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))
# bcrypt só considera os primeiros 72 bytes; acima disso a senha é recusada
BCRYPT_MAX_BYTES = 72


class AuthService:
    def __init__(self, secret_key: str = JWT_SECRET_KEY, algorithm: str = JWT_ALGORITHM, exp_hours: int = JWT_EXP_HOURS):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.exp_hours = exp_hours

    def hash_password(self, senha: str) -> str:
        if len(senha.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Senha deve ter no máximo {BCRYPT_MAX_BYTES} bytes")
        return bcrypt.hashpw(senha.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")

    def verify_password(self, senha: str, senha_hash: str) -> bool:
        if not senha or not senha_hash:
            return False
        if len(senha.encode("utf-8")) > BCRYPT_MAX_BYTES:
            return False
        return bcrypt.checkpw(senha.encode("utf-8"), senha_hash.encode("utf-8"))

    def generate_token(self, user_id: int, email: str, nome: str, role: str) -> str:
        payload = {
            "user_id": user_id,
            "email": email,
            "nome": nome,
            "role": role,
            "exp": datetime.now(timezone.utc) + timedelta(hours=self.exp_hours),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expirado")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Token inválido")

    def claims_or_none(self, token: Optional[str]) -> Optional[dict]:
        """Usado pelo gate: token ausente, inválido ou expirado equivale a sem sessão."""
        if not token:
            return None
        try:
            return self.decode_token(token)
        except AuthenticationError as e:
            logger.debug(f"🔒 Sessão descartada: {e.message}")
            return None
