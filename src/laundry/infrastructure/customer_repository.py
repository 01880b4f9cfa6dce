# lavanderia/src/laundry/infrastructure/customer_repository.py

from datetime import datetime

from psycopg2.extras import RealDictCursor

from database.db_connection import Database
from laundry.entities.customer import Customer

_COLUNAS = "id, nome, telefone, email, endereco, ativo, criado_em, atualizado_em"


def _to_customer(row) -> Customer | None:
    if not row:
        return None
    return Customer(**row)


class CustomerRepository:
    def __init__(self, db: Database):
        self.db = db

    # =====================================================
    # 🧩 Estrutura da Tabela
    # =====================================================
    def create_table(self):
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS cliente (
                        id SERIAL PRIMARY KEY,
                        nome VARCHAR(255) NOT NULL,
                        telefone VARCHAR(30) NOT NULL,
                        email VARCHAR(255),
                        endereco TEXT NOT NULL DEFAULT '',
                        ativo BOOLEAN NOT NULL DEFAULT TRUE,
                        criado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        atualizado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        CONSTRAINT cliente_telefone_key UNIQUE (telefone),
                        CONSTRAINT cliente_email_key UNIQUE (email)
                    );
                """)

    # =====================================================
    # 🧩 CRUD
    # =====================================================
    def create(self, customer: Customer) -> Customer:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    INSERT INTO cliente (nome, telefone, email, endereco, ativo)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUNAS};
                """, (customer.nome, customer.telefone, customer.email, customer.endereco, customer.ativo))
                return _to_customer(cur.fetchone())

    def find_by_id(self, customer_id: int) -> Customer | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM cliente WHERE id = %s;", (customer_id,))
                return _to_customer(cur.fetchone())

    def find_by_phone(self, telefone: str) -> Customer | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM cliente WHERE telefone = %s;", (telefone,))
                return _to_customer(cur.fetchone())

    def find_by_email(self, email: str) -> Customer | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM cliente WHERE email = %s;", (email,))
                return _to_customer(cur.fetchone())

    def list_all(self, incluir_inativos: bool = False) -> list[Customer]:
        filtro = "" if incluir_inativos else "WHERE ativo"
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM cliente {filtro} ORDER BY criado_em DESC, id DESC;")
                return [_to_customer(row) for row in cur.fetchall()]

    def update(self, customer: Customer) -> Customer:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    UPDATE cliente
                    SET nome = %s,
                        telefone = %s,
                        email = %s,
                        endereco = %s,
                        ativo = %s,
                        atualizado_em = NOW()
                    WHERE id = %s
                    RETURNING {_COLUNAS};
                """, (customer.nome, customer.telefone, customer.email, customer.endereco, customer.ativo, customer.id))
                return _to_customer(cur.fetchone())

    def delete(self, customer_id: int) -> bool:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM cliente WHERE id = %s;", (customer_id,))
                return cur.rowcount > 0

    # =====================================================
    # 📊 Contagens
    # =====================================================
    def count(self, criado_desde: datetime | None = None) -> int:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                if criado_desde is None:
                    cur.execute("SELECT COUNT(*) FROM cliente;")
                else:
                    cur.execute("SELECT COUNT(*) FROM cliente WHERE criado_em >= %s;", (criado_desde,))
                return cur.fetchone()[0]
