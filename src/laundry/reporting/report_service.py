# ============================================================
# 📦 src/laundry/reporting/report_service.py
# ============================================================

from datetime import date, datetime, time
from typing import Optional

import pandas as pd
from loguru import logger

from laundry.entities.order import Order, OrderStatus
from shared.errors import ValidationError

TOP_SERVICOS = 10
MESES_PADRAO = 6
MAX_MESES = 12


def parse_data(valor: Optional[str], campo: str) -> Optional[date]:
    if not valor:
        return None
    try:
        return date.fromisoformat(valor)
    except ValueError:
        raise ValidationError(f"{campo} inválida (use AAAA-MM-DD): {valor}")


def _pedidos_df(pedidos: list[Order]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "pedido_id": p.id,
                "status": p.status.value,
                "preco_total": float(p.preco_total),
                "criado_em": p.criado_em,
            }
            for p in pedidos
        ],
        columns=["pedido_id", "status", "preco_total", "criado_em"],
    )


def _itens_df(pedidos: list[Order]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "pedido_id": p.id,
                "servico_id": i.servico_id,
                "servico": i.servico_nome or "Serviço não encontrado",
                "quantidade": i.quantidade,
            }
            for p in pedidos
            for i in p.itens
        ],
        columns=["pedido_id", "servico_id", "servico", "quantidade"],
    )


def agregar_relatorio(
    pedidos: list[Order],
    status: Optional[str] = None,
    receita_desde: Optional[datetime] = None,
) -> dict:
    """
    Consolida os pedidos do período.
      - summary e orders respeitam o filtro de status
      - contagem por status, top serviços e receita mensal usam só o período
      - receita_desde limita a receita mensal (janela padrão quando não há período)
    """
    df = _pedidos_df(pedidos)
    filtrado = df if not status else df[df["status"] == status]
    ids_filtrados = set(filtrado["pedido_id"])

    por_status = {k: int(v) for k, v in df.groupby("status").size().items()}

    # =====================================================
    # 🔹 Serviços mais solicitados
    # =====================================================
    itens = _itens_df(pedidos)
    top_services = []
    if not itens.empty:
        top = (
            itens.groupby(["servico_id", "servico"], as_index=False)
            .agg(quantity=("quantidade", "sum"), orders=("pedido_id", "nunique"))
            .sort_values(["quantity", "orders"], ascending=False)
            .head(TOP_SERVICOS)
        )
        top_services = [
            {"service": r.servico, "quantity": int(r.quantity), "orders": int(r.orders)}
            for r in top.itertuples(index=False)
        ]

    # =====================================================
    # 🔹 Receita por mês
    # =====================================================
    mensal = df
    if receita_desde is not None:
        mensal = mensal[mensal["criado_em"] >= receita_desde]
    monthly_revenue = []
    if not mensal.empty:
        mensal = mensal.assign(month=pd.to_datetime(mensal["criado_em"]).dt.strftime("%Y-%m"))
        agrupado = (
            mensal.groupby("month", as_index=False)
            .agg(orders=("pedido_id", "count"), revenue=("preco_total", "sum"))
            .sort_values("month", ascending=False)
            .head(MAX_MESES)
        )
        monthly_revenue = [
            {"month": r.month, "orders": int(r.orders), "revenue": round(float(r.revenue), 2)}
            for r in agrupado.itertuples(index=False)
        ]

    return {
        "summary": {
            "total_orders": int(len(filtrado)),
            "total_revenue": round(float(filtrado["preco_total"].sum()), 2) if not filtrado.empty else 0.0,
            "orders_by_status": por_status,
        },
        "orders": [p for p in pedidos if p.id in ids_filtrados],
        "top_services": top_services,
        "monthly_revenue": monthly_revenue,
    }


class ReportService:
    def __init__(self, orders):
        self.orders = orders

    def gerar_relatorio(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        status: Optional[str] = None,
        agora: Optional[datetime] = None,
    ) -> dict:
        inicio = parse_data(start_date, "Data inicial")
        fim = parse_data(end_date, "Data final")
        if inicio and fim and inicio > fim:
            raise ValidationError("Data inicial deve ser anterior à data final")

        if status and status.lower() != "all":
            try:
                status = OrderStatus(status.upper()).value
            except ValueError:
                raise ValidationError(f"Status inválido: {status}")
        else:
            status = None

        pedidos = self.orders.list_all(
            criado_de=datetime.combine(inicio, time.min) if inicio else None,
            criado_ate=datetime.combine(fim, time.max) if fim else None,
        )

        receita_desde = None
        if not inicio and not fim:
            agora = agora or datetime.now()
            receita_desde = (pd.Timestamp(agora) - pd.DateOffset(months=MESES_PADRAO)).to_pydatetime()

        relatorio = agregar_relatorio(pedidos, status=status, receita_desde=receita_desde)
        if not pedidos:
            logger.warning(f"⚠️ Nenhum pedido no período {start_date or '-'} a {end_date or '-'}.")
        else:
            logger.info(
                f"📊 Relatório: {relatorio['summary']['total_orders']} pedidos, "
                f"R$ {relatorio['summary']['total_revenue']:.2f}"
            )
        return relatorio
