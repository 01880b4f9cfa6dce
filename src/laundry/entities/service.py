# lavanderia/src/laundry/entities/service.py

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Service:
    """Item do catálogo. O preço é copiado para o item do pedido no momento da venda."""

    nome: str
    preco: Decimal
    descricao: str = ""
    comissao: Decimal = Decimal("0")
    ativo: bool = True
    id: Optional[int] = field(default=None)
    criado_em: Optional[datetime] = field(default=None)
    atualizado_em: Optional[datetime] = field(default=None)

    def __post_init__(self):
        self.nome = str(self.nome).strip()
        self.preco = Decimal(str(self.preco))
        self.comissao = Decimal(str(self.comissao if self.comissao is not None else 0))
        self.descricao = self.descricao or ""
