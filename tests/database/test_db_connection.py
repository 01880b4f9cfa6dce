import threading
from types import SimpleNamespace

import pytest
from psycopg2 import InterfaceError, OperationalError, errors
from psycopg2.pool import PoolError

from database.db_connection import Database, _mensagem_unicidade
from shared.errors import ConflictError, InternalError


class FakeConnection:
    def __init__(self):
        self.commits = 0
        self.rollbacks = 0
        self.autocommit = True
        self.closed = 0

    def commit(self):
        self.commits += 1

    def rollback(self):
        if self.closed:
            raise InterfaceError("connection already closed")
        self.rollbacks += 1


class FakePool:
    def __init__(self):
        self.conn = FakeConnection()
        self.devolvidas = 0

    def getconn(self):
        return self.conn

    def putconn(self, conn):
        self.devolvidas += 1

    def closeall(self):
        pass


class LimitedPool:
    """Como o ThreadedConnectionPool: PoolError quando todas as conexões estão em uso."""

    def __init__(self, maxconn):
        self.maxconn = maxconn
        self.em_uso = 0
        self.lock = threading.Lock()

    def getconn(self):
        with self.lock:
            if self.em_uso >= self.maxconn:
                raise PoolError("connection pool exhausted")
            self.em_uso += 1
            return FakeConnection()

    def putconn(self, conn):
        with self.lock:
            self.em_uso -= 1

    def closeall(self):
        pass


class _TelefoneDuplicado(errors.UniqueViolation):
    diag = SimpleNamespace(constraint_name="cliente_telefone_key")


class _ClienteEmUso(errors.ForeignKeyViolation):
    diag = SimpleNamespace(constraint_name="pedido_cliente_id_fkey")


@pytest.fixture
def db():
    db = Database(params={"host": "fake", "dbname": "fake"})
    db._pool = FakePool()
    return db


def test_commit_ao_sair(db):
    with db.connection() as conn:
        assert conn.autocommit is False
    assert db._pool.conn.commits == 1
    assert db._pool.devolvidas == 1


def test_rollback_em_erro_de_dominio(db):
    with pytest.raises(ValueError):
        with db.connection():
            raise ValueError("falhou")
    assert db._pool.conn.rollbacks == 1
    assert db._pool.conn.commits == 0
    assert db._pool.devolvidas == 1


def test_erro_operacional_vira_internal_error(db):
    with pytest.raises(InternalError):
        with db.connection():
            raise OperationalError("conexão perdida")
    assert db._pool.conn.rollbacks == 1


def test_conexao_derrubada_nao_esconde_o_erro_original(db):
    with pytest.raises(InternalError, match="conexão"):
        with db.connection() as conn:
            conn.closed = 2
            raise OperationalError("server closed the connection unexpectedly")
    assert db._pool.conn.rollbacks == 0
    assert db._pool.devolvidas == 1


def test_unicidade_vira_conflito_com_mensagem_da_constraint(db):
    with pytest.raises(ConflictError, match="Já existe um cliente com este telefone"):
        with db.connection():
            raise _TelefoneDuplicado("duplicate key value violates unique constraint")
    assert db._pool.conn.rollbacks == 1
    assert db._pool.conn.commits == 0
    assert db._pool.devolvidas == 1


def test_chave_estrangeira_vira_conflito(db):
    with pytest.raises(ConflictError, match="Registro em uso"):
        with db.connection():
            raise _ClienteEmUso("update or delete violates foreign key constraint")
    assert db._pool.conn.rollbacks == 1
    assert db._pool.devolvidas == 1


def test_mensagens_de_unicidade():
    assert _mensagem_unicidade("cliente_telefone_key") == "Já existe um cliente com este telefone"
    assert _mensagem_unicidade("desconhecida") == "Registro duplicado"


def test_close_libera_pool(db):
    db.close()
    assert db._pool is None


class TestPoolCheio:
    def test_pool_esgotado_vira_internal_error(self):
        db = Database(params={"host": "fake", "dbname": "fake"})
        db._pool = LimitedPool(maxconn=0)
        with pytest.raises(InternalError, match="conexão"):
            with db.connection():
                pass

    def test_chamada_extra_espera_conexao_ser_devolvida(self):
        db = Database(params={"host": "fake", "dbname": "fake"}, maxconn=1)
        db._pool = LimitedPool(maxconn=1)
        dentro, liberar, segunda_obteve = threading.Event(), threading.Event(), threading.Event()
        falhas = []

        def primeira():
            with db.connection():
                dentro.set()
                liberar.wait(5)

        def segunda():
            try:
                with db.connection():
                    segunda_obteve.set()
            except Exception as e:
                falhas.append(e)

        t1 = threading.Thread(target=primeira)
        t1.start()
        assert dentro.wait(5)
        t2 = threading.Thread(target=segunda)
        t2.start()

        # Enquanto a primeira segura a única conexão, a segunda aguarda sem erro
        assert not segunda_obteve.wait(0.2)
        liberar.set()
        t1.join(5)
        t2.join(5)

        assert segunda_obteve.is_set()
        assert falhas == []
        assert db._pool.em_uso == 0

    def test_varias_threads_nunca_passam_do_tamanho_do_pool(self):
        db = Database(params={"host": "fake", "dbname": "fake"}, maxconn=2)
        db._pool = LimitedPool(maxconn=2)
        falhas = []

        def usar():
            try:
                for _ in range(20):
                    with db.connection():
                        pass
            except Exception as e:
                falhas.append(e)

        threads = [threading.Thread(target=usar) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(10)

        assert falhas == []
        assert db._pool.em_uso == 0
