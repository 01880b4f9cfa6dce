"""Precificação: snapshot de preço, subtotal e total com desconto."""

from decimal import Decimal

import pytest

from laundry.domain.pricing import (
    ItemRequest,
    calcular_total,
    normalizar_itens,
    precificar,
    validar_desconto,
)
from laundry.entities.service import Service
from shared.errors import NotFoundError, ValidationError


@pytest.fixture
def buscar():
    catalogo = {
        1: Service(id=1, nome="Wash & Dry", preco=Decimal("5.00")),
        2: Service(id=2, nome="Dry Cleaning", preco=Decimal("15.00")),
        3: Service(id=3, nome="Antigo", preco=Decimal("9.00"), ativo=False),
    }
    return lambda ids: {i: catalogo[i] for i in ids if i in catalogo}


ITENS = [ItemRequest(servico_id=1, quantidade=2), ItemRequest(servico_id=2, quantidade=1)]


class TestPrecificar:
    def test_total_sem_desconto(self, buscar):
        resultado = precificar(ITENS, buscar, Decimal("0"))
        assert [i.subtotal for i in resultado.itens] == [Decimal("10.00"), Decimal("15.00")]
        assert resultado.total == Decimal("25.00")

    def test_desconto_maior_que_subtotal_zera(self, buscar):
        assert precificar(ITENS, buscar, Decimal("30.00")).total == Decimal("0.00")

    def test_desconto_parcial(self, buscar):
        assert precificar(ITENS, buscar, "2.50").total == Decimal("22.50")

    def test_snapshot_do_preco_e_nome(self, buscar):
        item = precificar([ItemRequest(2, 3)], buscar).itens[0]
        assert item.preco == Decimal("15.00")
        assert item.subtotal == item.preco * item.quantidade
        assert item.servico_nome == "Dry Cleaning"

    def test_servico_inativo(self, buscar):
        with pytest.raises(NotFoundError, match="inativo"):
            precificar([ItemRequest(1, 1), ItemRequest(3, 1)], buscar)

    def test_servico_inexistente(self, buscar):
        with pytest.raises(NotFoundError):
            precificar([ItemRequest(42, 1)], buscar)

    def test_desconto_negativo(self, buscar):
        with pytest.raises(ValidationError, match="negativo"):
            precificar(ITENS, buscar, Decimal("-1"))


class TestNormalizarItens:
    def test_formato_legado(self):
        assert normalizar_itens(servico_id=4, quantidade=2) == [ItemRequest(4, 2)]

    def test_lista_de_dicts(self):
        itens = normalizar_itens([{"servico_id": 1, "quantidade": 1}, {"servico_id": 2, "quantidade": 3}])
        assert itens == [ItemRequest(1, 1), ItemRequest(2, 3)]

    @pytest.mark.parametrize("quantidade", [0, -1, None, 1.5, True])
    def test_quantidade_invalida(self, quantidade):
        with pytest.raises(ValidationError, match="Quantidade"):
            normalizar_itens([{"servico_id": 1, "quantidade": quantidade}])

    def test_sem_servico(self):
        with pytest.raises(ValidationError, match="Serviço é obrigatório"):
            normalizar_itens([{"quantidade": 1}])

    def test_lista_vazia(self):
        with pytest.raises(ValidationError, match="ao menos um item"):
            normalizar_itens([])


def test_calcular_total_nunca_negativo():
    assert calcular_total([Decimal("3.00"), Decimal("4.00")], Decimal("10")) == Decimal("0.00")


def test_desconto_ausente_vale_zero():
    assert validar_desconto(None) == Decimal("0.00")
