# lavanderia/src/laundry/domain/pricing.py

"""
Precificação de pedidos.

Cada item copia o preço do serviço no momento da precificação (snapshot) e
o total do pedido é sempre max(0, soma dos subtotais - desconto).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Mapping, Optional

from laundry.entities.order import OrderItem
from laundry.entities.service import Service
from shared.errors import NotFoundError, ValidationError

CENTAVOS = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ItemRequest:
    servico_id: int
    quantidade: int


@dataclass
class PricedItems:
    itens: list[OrderItem]
    subtotal: Decimal
    desconto: Decimal
    total: Decimal


def to_money(valor) -> Decimal:
    try:
        return Decimal(str(valor)).quantize(CENTAVOS)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Valor monetário inválido: {valor}")


def _campo(item, nome):
    if isinstance(item, Mapping):
        return item.get(nome)
    return getattr(item, nome, None)


def normalizar_itens(
    itens: Optional[Iterable] = None,
    servico_id: Optional[int] = None,
    quantidade: Optional[int] = None,
) -> list[ItemRequest]:
    """
    Aceita a lista de itens ou o formato legado de item único
    (servico_id + quantidade) e devolve sempre a lista.
    """
    if itens is None and servico_id is not None:
        itens = [{"servico_id": servico_id, "quantidade": quantidade}]

    normalizados = []
    for item in itens or []:
        sid = _campo(item, "servico_id")
        qtd = _campo(item, "quantidade")
        if sid is None:
            raise ValidationError("Serviço é obrigatório em todos os itens")
        if isinstance(qtd, bool) or not isinstance(qtd, int) or qtd < 1:
            raise ValidationError("Quantidade deve ser maior ou igual a 1")
        normalizados.append(ItemRequest(servico_id=int(sid), quantidade=qtd))

    if not normalizados:
        raise ValidationError("O pedido deve ter ao menos um item")
    return normalizados


def validar_desconto(desconto) -> Decimal:
    if desconto is None:
        return ZERO
    desconto = to_money(desconto)
    if desconto < 0:
        raise ValidationError("Desconto não pode ser negativo")
    return desconto


def calcular_total(subtotais: Iterable[Decimal], desconto=None) -> Decimal:
    bruto = sum((Decimal(s) for s in subtotais), ZERO)
    return max(ZERO, bruto - validar_desconto(desconto)).quantize(CENTAVOS)


def precificar(
    itens: list[ItemRequest],
    buscar_servicos: Callable[[list[int]], Mapping[int, Service]],
    desconto=None,
) -> PricedItems:
    """
    Valida e precifica os itens. Qualquer serviço ausente ou inativo aborta
    a operação inteira com NotFoundError.
    """
    if not itens:
        raise ValidationError("O pedido deve ter ao menos um item")
    desconto = validar_desconto(desconto)

    servicos = buscar_servicos(sorted({i.servico_id for i in itens}))

    precificados = []
    for item in itens:
        servico = servicos.get(item.servico_id)
        if servico is None or not servico.ativo:
            raise NotFoundError("Serviço não encontrado ou inativo")
        preco = to_money(servico.preco)
        precificados.append(OrderItem(
            servico_id=item.servico_id,
            quantidade=item.quantidade,
            preco=preco,
            subtotal=(preco * item.quantidade).quantize(CENTAVOS),
            servico_nome=servico.nome,
        ))

    subtotal = sum((i.subtotal for i in precificados), ZERO)
    return PricedItems(
        itens=precificados,
        subtotal=subtotal,
        desconto=desconto,
        total=calcular_total([subtotal], desconto),
    )
