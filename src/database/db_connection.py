#lavanderia/src/database/db_connection.py

import os
import threading
from contextlib import contextmanager

from psycopg2 import OperationalError, InterfaceError, DatabaseError, errors
from psycopg2.pool import PoolError, ThreadedConnectionPool
from loguru import logger

from shared.errors import ConflictError, InternalError


# =====================================================
# ⚙️ Configuração do banco
# =====================================================
DB_PARAMS = {
    "dbname": os.getenv("DB_NAME", os.getenv("POSTGRES_DB", "lavanderia_db")),
    "user": os.getenv("DB_USER", os.getenv("POSTGRES_USER", "postgres")),
    "password": os.getenv("DB_PASSWORD", os.getenv("POSTGRES_PASSWORD", "postgres")),
    "host": os.getenv("DB_HOST", os.getenv("POSTGRES_HOST", "lavanderia_db")),
    "port": os.getenv("DB_PORT", os.getenv("POSTGRES_PORT", "5432")),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    "application_name": os.getenv("DB_APP_NAME", "lavanderia"),
}

DB_POOL_MIN = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX = int(os.getenv("DB_POOL_MAX", "10"))


class Database:
    """
    Handle explícito de persistência.
    Criado uma vez por processo (lifespan da API ou CLI) e injetado nos repositórios.
    O pool só é aberto na primeira conexão pedida.
    """

    def __init__(self, params: dict | None = None, minconn: int = DB_POOL_MIN, maxconn: int = DB_POOL_MAX):
        self.params = params or DB_PARAMS
        self.minconn = minconn
        self.maxconn = maxconn
        self._pool = None
        self._lock = threading.Lock()
        # Limita os checkouts simultâneos ao tamanho do pool
        self._slots = threading.BoundedSemaphore(maxconn)

    def _get_pool(self) -> ThreadedConnectionPool:
        if self._pool is None:
            with self._lock:
                if self._pool is None:
                    try:
                        self._pool = ThreadedConnectionPool(self.minconn, self.maxconn, **self.params)
                    except OperationalError as e:
                        logger.error(f"❌ Falha ao conectar ao banco: {e}")
                        raise InternalError("Erro de conexão com banco de dados") from e
                    logger.info(
                        f"🔌 Pool PostgreSQL inicializado ({self.params['host']}/{self.params['dbname']}, max={self.maxconn})"
                    )
        return self._pool

    # =====================================================
    # 🧱 Context Manager seguro (commit, rollback e devolução ao pool)
    # =====================================================
    @contextmanager
    def connection(self):
        """
        Entrega uma conexão do pool dentro de uma transação.
        Commit ao sair normalmente, rollback em qualquer exceção.
        Com o pool cheio, a chamada espera uma conexão ser devolvida.
        Exemplo:
            with db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1;")
        """
        pool = self._get_pool()
        with self._slots:
            try:
                conn = pool.getconn()
            except PoolError as e:
                logger.error(f"💥 Pool PostgreSQL indisponível: {e}")
                raise InternalError("Erro de conexão com banco de dados") from e

            conn.autocommit = False
            try:
                yield conn
                conn.commit()
            except errors.UniqueViolation as e:
                _rollback(conn)
                logger.warning(f"⚠️ Violação de unicidade: {e.diag.constraint_name}")
                raise ConflictError(_mensagem_unicidade(e.diag.constraint_name)) from e
            except errors.ForeignKeyViolation as e:
                _rollback(conn)
                logger.warning(f"⚠️ Violação de chave estrangeira: {e.diag.constraint_name}")
                raise ConflictError("Registro em uso por outros dados") from e
            except (OperationalError, InterfaceError) as e:
                _rollback(conn)
                logger.error(f"💥 Erro operacional na conexão: {e}")
                raise InternalError("Erro de conexão com banco de dados") from e
            except DatabaseError as e:
                _rollback(conn)
                logger.error(f"❌ Erro de banco de dados: {e}")
                raise InternalError("Erro interno do servidor") from e
            except Exception:
                _rollback(conn)
                raise
            finally:
                pool.putconn(conn)

    def close(self):
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.debug("🔌 Pool PostgreSQL fechado.")


def _rollback(conn):
    # Conexão derrubada não aceita rollback; o pool a descarta no putconn
    if not conn.closed:
        conn.rollback()


# Mensagens por constraint (nomes definidos nos create_table dos repositórios)
_MENSAGENS_UNICIDADE = {
    "usuario_email_key": "Email já cadastrado",
    "cliente_telefone_key": "Já existe um cliente com este telefone",
    "cliente_email_key": "Já existe um cliente com este e-mail",
    "servico_nome_key": "Já existe um serviço com este nome",
}


def _mensagem_unicidade(constraint: str | None) -> str:
    return _MENSAGENS_UNICIDADE.get(constraint or "", "Registro duplicado")


# =====================================================
# 🔍 Verificação rápida (saúde do banco)
# =====================================================
def check_db_connection(db: Database) -> bool:
    """
    Testa a conexão com o banco de dados e retorna True/False.
    Útil para inicialização de containers e healthchecks.
    """
    try:
        with db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT NOW();")
                result = cur.fetchone()
                logger.success(f"✅ Banco conectado. Hora atual: {result[0]}")
        return True
    except Exception as e:
        logger.error(f"❌ Falha ao testar conexão com o banco: {e}")
        return False
