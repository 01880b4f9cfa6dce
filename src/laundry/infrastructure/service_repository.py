# lavanderia/src/laundry/infrastructure/service_repository.py

from psycopg2.extras import RealDictCursor

from database.db_connection import Database
from laundry.entities.service import Service

_COLUNAS = "id, nome, descricao, preco, comissao, ativo, criado_em, atualizado_em"


def _to_service(row) -> Service | None:
    if not row:
        return None
    return Service(**row)


class ServiceRepository:
    def __init__(self, db: Database):
        self.db = db

    # =====================================================
    # 🧩 Estrutura da Tabela
    # =====================================================
    def create_table(self):
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS servico (
                        id SERIAL PRIMARY KEY,
                        nome VARCHAR(255) NOT NULL,
                        descricao TEXT NOT NULL DEFAULT '',
                        preco NUMERIC(12, 2) NOT NULL CHECK (preco >= 0),
                        comissao NUMERIC(12, 2) NOT NULL DEFAULT 0 CHECK (comissao >= 0),
                        ativo BOOLEAN NOT NULL DEFAULT TRUE,
                        criado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        atualizado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        CONSTRAINT servico_nome_key UNIQUE (nome)
                    );
                """)

    # =====================================================
    # 🧩 CRUD
    # =====================================================
    def create(self, service: Service) -> Service:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    INSERT INTO servico (nome, descricao, preco, comissao, ativo)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUNAS};
                """, (service.nome, service.descricao, service.preco, service.comissao, service.ativo))
                return _to_service(cur.fetchone())

    def find_by_id(self, service_id: int) -> Service | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM servico WHERE id = %s;", (service_id,))
                return _to_service(cur.fetchone())

    def find_by_name(self, nome: str) -> Service | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM servico WHERE nome = %s;", (nome,))
                return _to_service(cur.fetchone())

    def find_many(self, service_ids: list[int]) -> dict[int, Service]:
        if not service_ids:
            return {}
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM servico WHERE id = ANY(%s);", (list(service_ids),))
                return {row["id"]: _to_service(row) for row in cur.fetchall()}

    def list_all(self) -> list[Service]:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM servico ORDER BY criado_em DESC, id DESC;")
                return [_to_service(row) for row in cur.fetchall()]

    def update(self, service: Service) -> Service:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    UPDATE servico
                    SET nome = %s,
                        descricao = %s,
                        preco = %s,
                        comissao = %s,
                        ativo = %s,
                        atualizado_em = NOW()
                    WHERE id = %s
                    RETURNING {_COLUNAS};
                """, (service.nome, service.descricao, service.preco, service.comissao, service.ativo, service.id))
                return _to_service(cur.fetchone())

    def delete(self, service_id: int) -> bool:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM servico WHERE id = %s;", (service_id,))
                return cur.rowcount > 0
