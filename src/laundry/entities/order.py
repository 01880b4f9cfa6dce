# lavanderia/src/laundry/entities/order.py

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Pedidos nesses estados não contam como ativos no painel do admin
FINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class PaymentMethod(str, Enum):
    PIX = "PIX"
    DINHEIRO = "DINHEIRO"
    CARTAO = "CARTAO"


@dataclass
class OrderItem:
    servico_id: int
    quantidade: int
    preco: Decimal
    subtotal: Decimal
    servico_nome: Optional[str] = None
    pedido_id: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Order:
    cliente_id: int
    vendedor_id: int
    itens: list[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    preco_total: Decimal = Decimal("0.00")
    desconto: Optional[Decimal] = None
    forma_pagamento: Optional[PaymentMethod] = None
    observacoes: Optional[str] = None
    cliente_nome: Optional[str] = None
    cliente_telefone: Optional[str] = None
    vendedor_nome: Optional[str] = None
    id: Optional[int] = None
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None

    def __post_init__(self):
        self.status = OrderStatus(self.status)
        if self.forma_pagamento is not None:
            self.forma_pagamento = PaymentMethod(self.forma_pagamento)
