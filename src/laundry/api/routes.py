# ==========================================================
# 📦 src/laundry/api/routes.py
# ==========================================================

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder

from authentication.api.dependencies import require_capability
from authentication.domain.roles import Capability, has_capability
from laundry.api.dependencies import (
    get_customer_use_case,
    get_order_use_case,
    get_report_service,
    get_service_use_case,
    get_stats_service,
    get_transfer_use_case,
)
from laundry.api.schemas import (
    AdminStatsSchema,
    CustomerCreateSchema,
    CustomerUpdateSchema,
    OrderCreateSchema,
    OrderUpdateSchema,
    ReportSchema,
    SellerStatsSchema,
    ServiceCreateSchema,
    ServiceUpdateSchema,
    TransferCreateSchema,
)
from laundry.reporting.report_service import ReportService
from laundry.reporting.stats_service import StatsService
from laundry.use_case.customer_use_case import CustomerUseCase
from laundry.use_case.order_use_case import OrderUseCase
from laundry.use_case.service_use_case import ServiceUseCase
from laundry.use_case.transfer_use_case import TransferUseCase

router = APIRouter()

manage_customers = require_capability(Capability.MANAGE_CUSTOMERS)
manage_orders = require_capability(Capability.MANAGE_ORDERS)
view_services = require_capability(Capability.VIEW_SERVICES)
manage_services = require_capability(Capability.MANAGE_SERVICES)
manage_transfers = require_capability(Capability.MANAGE_TRANSFERS)


# ==========================================================
# 🧠 Health check (sem autenticação)
# ==========================================================
@router.get("/health", tags=["Status"])
def health_check():
    return {"status": "ok", "message": "Lavanderia API saudável 🧺"}


# ==========================================================
# 🧺 CLIENTES
# ==========================================================
@router.get("/customers", tags=["Clientes"])
def list_customers(
    incluir_inativos: bool = Query(False),
    _: dict = Depends(manage_customers),
    use_case: CustomerUseCase = Depends(get_customer_use_case),
):
    return [asdict(c) for c in use_case.list_customers(incluir_inativos)]


@router.post("/customers", status_code=201, tags=["Clientes"])
def create_customer(
    payload: CustomerCreateSchema,
    _: dict = Depends(manage_customers),
    use_case: CustomerUseCase = Depends(get_customer_use_case),
):
    customer = use_case.create_customer(payload.nome, payload.telefone, payload.email, payload.endereco)
    return asdict(customer)


@router.get("/customers/{customer_id}", tags=["Clientes"])
def get_customer(
    customer_id: int,
    _: dict = Depends(manage_customers),
    use_case: CustomerUseCase = Depends(get_customer_use_case),
):
    customer, pedidos = use_case.get_customer_with_orders(customer_id)
    return {**asdict(customer), "pedidos": [asdict(p) for p in pedidos]}


@router.put("/customers/{customer_id}", tags=["Clientes"])
def update_customer(
    customer_id: int,
    payload: CustomerUpdateSchema,
    _: dict = Depends(manage_customers),
    use_case: CustomerUseCase = Depends(get_customer_use_case),
):
    return asdict(use_case.update_customer(customer_id, payload.model_dump(exclude_unset=True)))


@router.delete("/customers/{customer_id}", tags=["Clientes"])
def delete_customer(
    customer_id: int,
    _: dict = Depends(manage_customers),
    use_case: CustomerUseCase = Depends(get_customer_use_case),
):
    use_case.delete_customer(customer_id)
    return {"message": "Cliente excluído com sucesso"}


# ==========================================================
# 🧼 SERVIÇOS
# ==========================================================
@router.get("/services", tags=["Serviços"])
def list_services(_: dict = Depends(view_services), use_case: ServiceUseCase = Depends(get_service_use_case)):
    return [asdict(s) for s in use_case.list_services()]


@router.post("/services", status_code=201, tags=["Serviços"])
def create_service(
    payload: ServiceCreateSchema,
    _: dict = Depends(manage_services),
    use_case: ServiceUseCase = Depends(get_service_use_case),
):
    service = use_case.create_service(payload.nome, payload.preco, payload.comissao, payload.descricao)
    return asdict(service)


@router.get("/services/{service_id}", tags=["Serviços"])
def get_service(
    service_id: int,
    _: dict = Depends(view_services),
    use_case: ServiceUseCase = Depends(get_service_use_case),
):
    return asdict(use_case.get_service(service_id))


@router.put("/services/{service_id}", tags=["Serviços"])
def update_service(
    service_id: int,
    payload: ServiceUpdateSchema,
    _: dict = Depends(manage_services),
    use_case: ServiceUseCase = Depends(get_service_use_case),
):
    return asdict(use_case.update_service(service_id, payload.model_dump(exclude_unset=True)))


@router.delete("/services/{service_id}", tags=["Serviços"])
def delete_service(
    service_id: int,
    _: dict = Depends(manage_services),
    use_case: ServiceUseCase = Depends(get_service_use_case),
):
    use_case.delete_service(service_id)
    return {"message": "Serviço excluído com sucesso"}


# ==========================================================
# 🧾 PEDIDOS
# ==========================================================
@router.get("/orders", tags=["Pedidos"])
def list_orders(
    status: str | None = Query(None),
    todos: bool = Query(False, description="Vendedor: listar pedidos de todos os vendedores"),
    user: dict = Depends(manage_orders),
    use_case: OrderUseCase = Depends(get_order_use_case),
):
    vendedor_id = None
    if not has_capability(user["role"], Capability.ADMIN_AREA) and not todos:
        vendedor_id = user["user_id"]
    return [asdict(o) for o in use_case.list_orders(status=status, vendedor_id=vendedor_id)]


@router.post("/orders", status_code=201, tags=["Pedidos"])
def create_order(
    payload: OrderCreateSchema,
    user: dict = Depends(manage_orders),
    use_case: OrderUseCase = Depends(get_order_use_case),
):
    order = use_case.create_order(
        cliente_id=payload.cliente_id,
        vendedor_id=user["user_id"],
        itens=payload.itens,
        servico_id=payload.servico_id,
        quantidade=payload.quantidade,
        desconto=payload.desconto,
        forma_pagamento=payload.forma_pagamento,
        observacoes=payload.observacoes,
        status=payload.status,
    )
    return asdict(order)


@router.get("/orders/{order_id}", tags=["Pedidos"])
def get_order(order_id: int, _: dict = Depends(manage_orders), use_case: OrderUseCase = Depends(get_order_use_case)):
    return asdict(use_case.get_order(order_id))


@router.put("/orders/{order_id}", tags=["Pedidos"])
def update_order(
    order_id: int,
    payload: OrderUpdateSchema,
    _: dict = Depends(manage_orders),
    use_case: OrderUseCase = Depends(get_order_use_case),
):
    return asdict(use_case.update_order(order_id, payload.model_dump(exclude_unset=True)))


@router.delete("/orders/{order_id}", tags=["Pedidos"])
def delete_order(order_id: int, _: dict = Depends(manage_orders), use_case: OrderUseCase = Depends(get_order_use_case)):
    use_case.delete_order(order_id)
    return {"message": "Pedido deletado com sucesso"}


# ==========================================================
# 💸 TRANSFERÊNCIAS
# ==========================================================
@router.get("/transfers", tags=["Transferências"])
def list_transfers(_: dict = Depends(manage_transfers), use_case: TransferUseCase = Depends(get_transfer_use_case)):
    return [asdict(t) for t in use_case.list_transfers()]


@router.get("/transfers/saldos", tags=["Transferências"])
def transfer_balances(_: dict = Depends(manage_transfers), use_case: TransferUseCase = Depends(get_transfer_use_case)):
    return use_case.balances()


@router.post("/transfers", status_code=201, tags=["Transferências"])
def create_transfer(
    payload: TransferCreateSchema,
    _: dict = Depends(manage_transfers),
    use_case: TransferUseCase = Depends(get_transfer_use_case),
):
    return asdict(use_case.create_transfer(payload.origem, payload.destino, payload.valor))


# ==========================================================
# 📊 RELATÓRIOS E PAINÉIS
# ==========================================================
@router.get("/reports", tags=["Relatórios"], response_model=ReportSchema)
def get_report(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    status: str | None = Query(None),
    _: dict = Depends(require_capability(Capability.VIEW_REPORTS)),
    service: ReportService = Depends(get_report_service),
):
    relatorio = service.gerar_relatorio(start_date, end_date, status)
    relatorio["orders"] = jsonable_encoder([asdict(o) for o in relatorio["orders"]])
    return relatorio


@router.get("/admin/stats", tags=["Painéis"], response_model=AdminStatsSchema)
def admin_stats(
    _: dict = Depends(require_capability(Capability.VIEW_ADMIN_STATS)),
    service: StatsService = Depends(get_stats_service),
):
    return service.admin_stats()


@router.get("/seller/stats", tags=["Painéis"], response_model=SellerStatsSchema)
def seller_stats(
    user: dict = Depends(require_capability(Capability.VIEW_SELLER_STATS)),
    service: StatsService = Depends(get_stats_service),
):
    return service.seller_stats(user["user_id"])

