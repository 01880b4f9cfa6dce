"""Escrita do pedido com itens pelo repositório PostgreSQL, sobre um pool falso."""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from psycopg2 import errors

from database.db_connection import Database
from laundry.entities.order import Order, OrderItem, OrderStatus
from laundry.infrastructure import order_repository as order_repository_module
from laundry.infrastructure.order_repository import OrderRepository
from shared.errors import ConflictError


class _ServicoInexistente(errors.ForeignKeyViolation):
    diag = SimpleNamespace(constraint_name="pedido_item_servico_id_fkey")


class _TelefoneDuplicado(errors.UniqueViolation):
    diag = SimpleNamespace(constraint_name="cliente_telefone_key")


def _linha_pedido(pedido_id):
    return {
        "id": pedido_id, "cliente_id": 3, "vendedor_id": 2, "status": "PENDING",
        "preco_total": Decimal("25.00"), "desconto": None, "forma_pagamento": "PIX",
        "observacoes": None, "criado_em": datetime(2026, 3, 10), "atualizado_em": datetime(2026, 3, 10),
        "cliente_nome": "Maria", "cliente_telefone": "11999990000", "vendedor_nome": "Vendedor",
    }


class FakeCursor:
    """Registra cada comando e responde às consultas do repositório de pedidos."""

    def __init__(self, conn):
        self.conn = conn
        self.ultimo = ""
        self.rowcount = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.ultimo = " ".join(sql.split())
        self.conn.comandos.append(self.ultimo)
        if self.conn.falha_em and self.ultimo.startswith(self.conn.falha_em):
            raise self.conn.erro

    def fetchone(self):
        if "RETURNING id" in self.ultimo:
            return {"id": 7}
        if "FROM pedido p" in self.ultimo:
            return _linha_pedido(7)
        return None

    def fetchall(self):
        if "FROM pedido_item i" in self.ultimo:
            return [
                {"id": 1, "pedido_id": 7, "servico_id": 1, "quantidade": 2, "preco": Decimal("5.00"),
                 "subtotal": Decimal("10.00"), "servico_nome": "Wash & Dry"},
                {"id": 2, "pedido_id": 7, "servico_id": 2, "quantidade": 1, "preco": Decimal("15.00"),
                 "subtotal": Decimal("15.00"), "servico_nome": "Dry Cleaning"},
            ]
        return []


class FakeConnection:
    def __init__(self):
        self.comandos = []
        self.commits = 0
        self.rollbacks = 0
        self.autocommit = True
        self.closed = 0
        self.falha_em = None
        self.erro = None

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakePool:
    def __init__(self):
        self.conn = FakeConnection()
        self.retiradas = 0
        self.devolvidas = 0

    def getconn(self):
        self.retiradas += 1
        return self.conn

    def putconn(self, conn):
        self.devolvidas += 1

    def closeall(self):
        pass


@pytest.fixture(autouse=True)
def execute_values_no_cursor(monkeypatch):
    # Sem servidor, o lote de itens vira um único execute no cursor falso
    monkeypatch.setattr(
        order_repository_module, "execute_values",
        lambda cur, sql, linhas: cur.execute(sql, linhas),
    )


@pytest.fixture
def pool():
    return FakePool()


@pytest.fixture
def repo(pool):
    db = Database(params={"host": "fake", "dbname": "fake"})
    db._pool = pool
    return OrderRepository(db)


@pytest.fixture
def pedido():
    return Order(
        cliente_id=3,
        vendedor_id=2,
        preco_total=Decimal("25.00"),
        forma_pagamento="PIX",
        itens=[
            OrderItem(servico_id=1, quantidade=2, preco=Decimal("5.00"), subtotal=Decimal("10.00")),
            OrderItem(servico_id=2, quantidade=1, preco=Decimal("15.00"), subtotal=Decimal("15.00")),
        ],
    )


def _comeca(comandos, prefixo):
    return [c for c in comandos if c.startswith(prefixo)]


class TestCriacaoAtomica:
    def test_pedido_e_itens_na_mesma_transacao(self, repo, pool, pedido):
        criado = repo.create_with_items(pedido)

        assert pool.retiradas == 1
        assert pool.conn.commits == 1
        assert pool.conn.rollbacks == 0
        assert pool.devolvidas == 1
        comandos = pool.conn.comandos
        assert len(_comeca(comandos, "INSERT INTO pedido (")) == 1
        assert len(_comeca(comandos, "INSERT INTO pedido_item")) == 1
        assert comandos.index(_comeca(comandos, "INSERT INTO pedido (")[0]) < \
            comandos.index(_comeca(comandos, "INSERT INTO pedido_item")[0])

        assert criado.id == 7
        assert criado.status is OrderStatus.PENDING
        assert [i.servico_nome for i in criado.itens] == ["Wash & Dry", "Dry Cleaning"]

    def test_falha_nos_itens_desfaz_o_pedido(self, repo, pool, pedido):
        pool.conn.falha_em = "INSERT INTO pedido_item"
        pool.conn.erro = _ServicoInexistente("insert violates foreign key constraint")

        with pytest.raises(ConflictError, match="Registro em uso"):
            repo.create_with_items(pedido)

        assert pool.conn.commits == 0
        assert pool.conn.rollbacks == 1
        assert pool.devolvidas == 1
        # Nada foi lido depois da falha
        assert not _comeca(pool.conn.comandos, "SELECT")


class TestTrocaDeItens:
    def test_update_delete_e_insert_numa_transacao(self, repo, pool, pedido):
        pedido.id = 7
        salvo = repo.save(pedido, replace_items=True)

        comandos = pool.conn.comandos
        assert pool.retiradas == 1
        assert pool.conn.commits == 1
        assert [c.split()[0] for c in comandos[:3]] == ["UPDATE", "DELETE", "INSERT"]
        assert salvo.preco_total == Decimal("25.00")

    def test_sem_troca_nao_mexe_nos_itens(self, repo, pool, pedido):
        pedido.id = 7
        repo.save(pedido)

        assert not _comeca(pool.conn.comandos, "DELETE")
        assert not _comeca(pool.conn.comandos, "INSERT")
        assert pool.conn.commits == 1

    def test_falha_ao_recriar_itens_mantem_os_antigos(self, repo, pool, pedido):
        pedido.id = 7
        pool.conn.falha_em = "INSERT INTO pedido_item"
        pool.conn.erro = _ServicoInexistente("insert violates foreign key constraint")

        with pytest.raises(ConflictError):
            repo.save(pedido, replace_items=True)

        # O DELETE já executado é desfeito pelo rollback
        assert _comeca(pool.conn.comandos, "DELETE")
        assert pool.conn.commits == 0
        assert pool.conn.rollbacks == 1


def test_unicidade_no_repositorio_vira_conflito(repo, pool, pedido):
    pool.conn.falha_em = "INSERT INTO pedido ("
    pool.conn.erro = _TelefoneDuplicado("duplicate key value violates unique constraint")

    with pytest.raises(ConflictError, match="Já existe um cliente com este telefone"):
        repo.create_with_items(pedido)
    assert pool.conn.rollbacks == 1
    assert pool.devolvidas == 1
