# lavanderia/src/laundry/entities/transfer.py

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class CashPool(str, Enum):
    PIX = "PIX"
    DINHEIRO = "DINHEIRO"


@dataclass
class Transfer:
    origem: CashPool
    destino: CashPool
    valor: Decimal
    id: Optional[int] = None
    criado_em: Optional[datetime] = None

    def __post_init__(self):
        self.origem = CashPool(self.origem)
        self.destino = CashPool(self.destino)
        self.valor = Decimal(str(self.valor))
