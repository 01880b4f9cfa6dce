# lavanderia/src/authentication/api/schemas.py

from typing import Optional

from pydantic import BaseModel, EmailStr

from authentication.domain.roles import Role


class LoginSchema(BaseModel):
    email: EmailStr
    senha: str


class AdminSetupSchema(BaseModel):
    nome: str
    email: EmailStr
    senha: str


class UserCreateSchema(BaseModel):
    nome: str
    email: EmailStr
    senha: str
    role: Role = Role.SELLER
    ativo: bool = True


class UserUpdateSchema(BaseModel):
    """
    Atualização parcial: campo ausente = sem alteração.
    senha vazia também mantém a senha atual.
    """

    nome: Optional[str] = None
    email: Optional[EmailStr] = None
    senha: Optional[str] = None
    role: Optional[Role] = None
    ativo: Optional[bool] = None
