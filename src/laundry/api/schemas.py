# lavanderia/src/laundry/api/schemas.py

# Campos opcionais nos schemas de criação: a validação de obrigatoriedade fica
# no domínio para devolver as mensagens de negócio.
# Nos schemas de atualização, campo ausente = sem alteração (model_dump(exclude_unset=True)).

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# ============================================================
# 🧺 Clientes
# ============================================================
class CustomerCreateSchema(BaseModel):
    nome: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    endereco: Optional[str] = None


class CustomerUpdateSchema(BaseModel):
    nome: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    endereco: Optional[str] = None
    ativo: Optional[bool] = None


# ============================================================
# 🧼 Serviços
# ============================================================
class ServiceCreateSchema(BaseModel):
    nome: Optional[str] = None
    preco: Optional[Decimal] = None
    comissao: Optional[Decimal] = None
    descricao: Optional[str] = None


class ServiceUpdateSchema(BaseModel):
    nome: Optional[str] = None
    preco: Optional[Decimal] = None
    comissao: Optional[Decimal] = None
    descricao: Optional[str] = None
    ativo: Optional[bool] = None


# ============================================================
# 🧾 Pedidos
# ============================================================
class OrderItemSchema(BaseModel):
    servico_id: int
    quantidade: int


class OrderCreateSchema(BaseModel):
    cliente_id: Optional[int] = None
    itens: Optional[list[OrderItemSchema]] = None
    # formato legado de item único
    servico_id: Optional[int] = None
    quantidade: Optional[int] = None
    desconto: Optional[Decimal] = None
    forma_pagamento: Optional[str] = None
    observacoes: Optional[str] = None
    status: Optional[str] = None


class OrderUpdateSchema(BaseModel):
    cliente_id: Optional[int] = None
    itens: Optional[list[OrderItemSchema]] = None
    servico_id: Optional[int] = None
    quantidade: Optional[int] = None
    desconto: Optional[Decimal] = None
    forma_pagamento: Optional[str] = None
    observacoes: Optional[str] = None
    status: Optional[str] = None


# ============================================================
# 💸 Transferências
# ============================================================
class TransferCreateSchema(BaseModel):
    origem: Optional[str] = None
    destino: Optional[str] = None
    valor: Optional[Decimal] = None


# ============================================================
# 📊 Relatórios e painéis (JSON em camelCase, como os painéis consomem)
# ============================================================
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportSummarySchema(CamelModel):
    total_orders: int
    total_revenue: float
    orders_by_status: dict[str, int]


class TopServiceSchema(CamelModel):
    service: str
    quantity: int
    orders: int


class MonthlyRevenueSchema(CamelModel):
    month: str
    orders: int
    revenue: float


class ReportSchema(CamelModel):
    summary: ReportSummarySchema
    orders: list[dict]
    top_services: list[TopServiceSchema]
    monthly_revenue: list[MonthlyRevenueSchema]


class AdminStatsSchema(CamelModel):
    active_orders: int
    revenue_today: float
    new_customers: int
    total_customers: int


class SellerStatsSchema(CamelModel):
    orders_today: int
    pending_orders: int
    total_customers: int
    sales_today: float
