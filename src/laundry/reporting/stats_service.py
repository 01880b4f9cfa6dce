# ============================================================
# 📦 src/laundry/reporting/stats_service.py
# ============================================================

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from decimal import Decimal
from typing import Optional

from loguru import logger

from laundry.entities.order import FINAL_STATUSES, OrderStatus


def inicio_do_dia(agora: Optional[datetime] = None) -> datetime:
    """Meia-noite local do dia corrente."""
    agora = agora or datetime.now()
    return agora.replace(hour=0, minute=0, second=0, microsecond=0)


def _dinheiro(valor) -> float:
    return float(Decimal(valor or 0).quantize(Decimal("0.01")))


class StatsService:
    """
    Contagens pontuais dos painéis.
    As consultas são independentes e rodam em paralelo, cada uma com sua conexão do pool.
    """

    def __init__(self, orders, customers, max_workers: int = 4):
        self.orders = orders
        self.customers = customers
        self.max_workers = max_workers

    def admin_stats(self, agora: Optional[datetime] = None) -> dict:
        hoje = inicio_do_dia(agora)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            ativos = pool.submit(self.orders.count, excluir_status=FINAL_STATUSES)
            receita = pool.submit(self.orders.sum_total, criado_de=hoje)
            novos = pool.submit(self.customers.count, criado_desde=hoje)
            total = pool.submit(self.customers.count)

            stats = {
                "active_orders": ativos.result(),
                "revenue_today": _dinheiro(receita.result()),
                "new_customers": novos.result(),
                "total_customers": total.result(),
            }
        logger.debug(f"📈 Stats admin: {stats}")
        return stats

    def seller_stats(self, vendedor_id: int, agora: Optional[datetime] = None) -> dict:
        hoje = inicio_do_dia(agora)
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            pedidos_hoje = pool.submit(self.orders.count, vendedor_id=vendedor_id, criado_de=hoje)
            pendentes = pool.submit(self.orders.count, status=OrderStatus.PENDING, vendedor_id=vendedor_id)
            clientes = pool.submit(self.customers.count)
            vendas = pool.submit(self.orders.sum_total, vendedor_id=vendedor_id, criado_de=hoje)

            stats = {
                "orders_today": pedidos_hoje.result(),
                "pending_orders": pendentes.result(),
                "total_customers": clientes.result(),
                "sales_today": _dinheiro(vendas.result()),
            }
        logger.debug(f"📈 Stats vendedor {vendedor_id}: {stats}")
        return stats
