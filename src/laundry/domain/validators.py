# lavanderia/src/laundry/domain/validators.py

from decimal import Decimal

from laundry.domain.pricing import to_money
from laundry.entities.transfer import CashPool
from shared.errors import ValidationError


def texto_obrigatorio(valor, mensagem: str) -> str:
    if valor is None or not str(valor).strip():
        raise ValidationError(mensagem)
    return str(valor).strip()


def validar_cliente(nome, telefone):
    if not nome or not str(nome).strip() or not telefone or not str(telefone).strip():
        raise ValidationError("Nome e telefone são obrigatórios")


def valor_nao_negativo(valor, campo: str) -> Decimal:
    valor = to_money(valor)
    if valor < 0:
        raise ValidationError(f"{campo} deve ser maior ou igual a zero")
    return valor


def validar_servico(nome, preco, comissao=None) -> tuple[str, Decimal, Decimal]:
    if not nome or not str(nome).strip() or preco is None:
        raise ValidationError("Nome e preço são obrigatórios")
    preco = valor_nao_negativo(preco, "Preço")
    comissao = valor_nao_negativo(comissao, "Comissão") if comissao is not None else Decimal("0.00")
    return str(nome).strip(), preco, comissao


def parse_cash_pool(valor) -> CashPool:
    try:
        return CashPool(str(valor).strip().upper())
    except ValueError:
        raise ValidationError("Origem e destino devem ser PIX ou DINHEIRO")


def validar_transferencia(origem, destino, valor) -> tuple[CashPool, CashPool, Decimal]:
    if not origem or not destino or valor is None or valor == "":
        raise ValidationError("Todos os campos são obrigatórios")

    origem = parse_cash_pool(origem)
    destino = parse_cash_pool(destino)
    if origem == destino:
        raise ValidationError("Origem e destino devem ser diferentes")

    valor = to_money(valor)
    if valor <= 0:
        raise ValidationError("O valor deve ser maior que zero")
    return origem, destino, valor
