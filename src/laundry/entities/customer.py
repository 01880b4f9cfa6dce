# lavanderia/src/laundry/entities/customer.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class Customer:
    nome: str
    telefone: str
    email: Optional[str] = None
    endereco: str = ""
    ativo: bool = True
    id: Optional[int] = field(default=None)
    criado_em: Optional[datetime] = field(default=None)
    atualizado_em: Optional[datetime] = field(default=None)

    def __post_init__(self):
        self.nome = str(self.nome).strip()
        self.telefone = str(self.telefone).strip()
        # E-mail vazio é gravado como NULL (unicidade só vale para e-mails preenchidos)
        if self.email is not None:
            self.email = str(self.email).strip().lower() or None
        self.endereco = (self.endereco or "").strip()
