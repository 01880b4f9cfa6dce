# lavanderia/src/laundry/use_case/order_use_case.py

from loguru import logger

from laundry.domain.pricing import (
    ItemRequest,
    PricedItems,
    calcular_total,
    normalizar_itens,
    precificar,
    validar_desconto,
)
from laundry.entities.order import Order, OrderStatus, PaymentMethod
from shared.errors import NotFoundError, ValidationError


def parse_status(valor) -> OrderStatus:
    try:
        return OrderStatus(str(valor).strip().upper())
    except ValueError:
        raise ValidationError(f"Status inválido: {valor}")


def parse_forma_pagamento(valor) -> PaymentMethod | None:
    if valor is None or valor == "":
        return None
    try:
        return PaymentMethod(str(valor).strip().upper())
    except ValueError:
        raise ValidationError(f"Forma de pagamento inválida: {valor}")


class OrderUseCase:
    def __init__(self, orders, services, customers):
        self.orders = orders
        self.services = services
        self.customers = customers

    # =====================================================
    # 💲 Precificação
    # =====================================================
    def price(self, itens: list[ItemRequest], desconto=None) -> PricedItems:
        return precificar(itens, self.services.find_many, desconto)

    def _check_customer(self, cliente_id):
        if cliente_id is None:
            raise ValidationError("Cliente é obrigatório")
        customer = self.customers.find_by_id(cliente_id)
        if not customer or not customer.ativo:
            raise NotFoundError("Cliente não encontrado")

    # =====================================================
    # 🧾 Criação
    # =====================================================
    def create_order(
        self,
        cliente_id: int,
        vendedor_id: int,
        itens=None,
        servico_id: int | None = None,
        quantidade: int | None = None,
        desconto=None,
        forma_pagamento=None,
        observacoes: str | None = None,
        status=OrderStatus.PENDING,
    ) -> Order:
        normalizados = normalizar_itens(itens, servico_id, quantidade)
        status = parse_status(status or OrderStatus.PENDING)
        forma_pagamento = parse_forma_pagamento(forma_pagamento)
        self._check_customer(cliente_id)

        precificado = self.price(normalizados, desconto)

        order = self.orders.create_with_items(Order(
            cliente_id=cliente_id,
            vendedor_id=vendedor_id,
            itens=precificado.itens,
            status=status,
            preco_total=precificado.total,
            desconto=precificado.desconto if desconto is not None else None,
            forma_pagamento=forma_pagamento,
            observacoes=observacoes,
        ))
        logger.info(
            f"🧾 Pedido {order.id} criado: cliente={cliente_id} vendedor={vendedor_id} "
            f"itens={len(order.itens)} total=R$ {order.preco_total}"
        )
        return order

    # =====================================================
    # 🔍 Consulta
    # =====================================================
    def list_orders(self, status=None, vendedor_id: int | None = None) -> list[Order]:
        status = parse_status(status) if status else None
        return self.orders.list_all(status=status, vendedor_id=vendedor_id)

    def get_order(self, order_id: int) -> Order:
        order = self.orders.find_by_id(order_id)
        if not order:
            raise NotFoundError("Pedido não encontrado")
        return order

    # =====================================================
    # ✏️ Atualização
    # =====================================================
    def replace_items(self, order_id: int, itens) -> Order:
        return self.update_order(order_id, {"itens": itens})

    def update_order(self, order_id: int, alteracoes: dict) -> Order:
        """
        alteracoes: cliente_id, status, observacoes, forma_pagamento, desconto,
        itens (ou servico_id/quantidade no formato legado), apenas os enviados.
        Itens novos substituem todos os anteriores na mesma transação.
        """
        order = self.get_order(order_id)

        cliente_id = alteracoes.get("cliente_id")
        if cliente_id is not None and cliente_id != order.cliente_id:
            self._check_customer(cliente_id)
            order.cliente_id = cliente_id

        if alteracoes.get("status") is not None:
            order.status = parse_status(alteracoes["status"])

        if "observacoes" in alteracoes:
            order.observacoes = alteracoes["observacoes"]

        if "forma_pagamento" in alteracoes:
            order.forma_pagamento = parse_forma_pagamento(alteracoes["forma_pagamento"])

        if "desconto" in alteracoes:
            desconto = alteracoes["desconto"]
            order.desconto = validar_desconto(desconto) if desconto is not None else None

        novos_itens = self._itens_da_alteracao(order, alteracoes)
        if novos_itens is not None:
            precificado = self.price(novos_itens, order.desconto)
            order.itens = precificado.itens
            order.preco_total = precificado.total
        elif "desconto" in alteracoes:
            order.preco_total = calcular_total([i.subtotal for i in order.itens], order.desconto)

        order = self.orders.save(order, replace_items=novos_itens is not None)
        logger.info(f"✏️ Pedido {order_id} atualizado: status={order.status.value} total=R$ {order.preco_total}")
        return order

    @staticmethod
    def _itens_da_alteracao(order: Order, alteracoes: dict) -> list[ItemRequest] | None:
        if alteracoes.get("itens") is not None:
            return normalizar_itens(alteracoes["itens"])

        servico_id = alteracoes.get("servico_id")
        quantidade = alteracoes.get("quantidade")
        if servico_id is None and quantidade is None:
            return None

        # Formato legado: completa com o primeiro item atual
        atual = order.itens[0] if order.itens else None
        return normalizar_itens(
            servico_id=servico_id if servico_id is not None else (atual.servico_id if atual else None),
            quantidade=quantidade if quantidade is not None else (atual.quantidade if atual else None),
        )

    def delete_order(self, order_id: int):
        if not self.orders.delete(order_id):
            raise NotFoundError("Pedido não encontrado")
        logger.info(f"🗑️ Pedido {order_id} excluído")
