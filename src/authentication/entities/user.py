# lavanderia/src/authentication/entities/user.py

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from authentication.domain.roles import Role


@dataclass
class User:
    id: Optional[int] = None
    nome: str = ""
    email: str = ""
    senha_hash: str = ""
    role: Role = Role.SELLER
    ativo: bool = True
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    def __post_init__(self):
        self.role = Role(self.role)
        self.email = str(self.email).strip().lower()

    def to_public_dict(self) -> dict:
        """Representação sem o hash de senha."""
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "role": self.role.value,
            "ativo": self.ativo,
            "criado_em": self.criado_em,
            "atualizado_em": self.atualizado_em,
        }
