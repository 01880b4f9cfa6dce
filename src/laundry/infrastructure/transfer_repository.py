# lavanderia/src/laundry/infrastructure/transfer_repository.py

from decimal import Decimal

from psycopg2.extras import RealDictCursor

from database.db_connection import Database
from laundry.entities.transfer import Transfer


class TransferRepository:
    def __init__(self, db: Database):
        self.db = db

    # =====================================================
    # 🧩 Estrutura da Tabela
    # =====================================================
    def create_table(self):
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS transferencia (
                        id SERIAL PRIMARY KEY,
                        origem VARCHAR(20) NOT NULL CHECK (origem IN ('PIX', 'DINHEIRO')),
                        destino VARCHAR(20) NOT NULL CHECK (destino IN ('PIX', 'DINHEIRO')),
                        valor NUMERIC(12, 2) NOT NULL CHECK (valor > 0),
                        criado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        CHECK (origem <> destino)
                    );
                """)

    def create(self, transfer: Transfer) -> Transfer:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    INSERT INTO transferencia (origem, destino, valor)
                    VALUES (%s, %s, %s)
                    RETURNING id, origem, destino, valor, criado_em;
                """, (transfer.origem.value, transfer.destino.value, transfer.valor))
                return Transfer(**cur.fetchone())

    def list_all(self) -> list[Transfer]:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT id, origem, destino, valor, criado_em
                    FROM transferencia
                    ORDER BY criado_em DESC, id DESC;
                """)
                return [Transfer(**row) for row in cur.fetchall()]

    def net_by_pool(self) -> dict[str, Decimal]:
        """Entradas menos saídas por caixa."""
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT caixa, COALESCE(SUM(valor), 0)
                    FROM (
                        SELECT destino AS caixa, valor FROM transferencia
                        UNION ALL
                        SELECT origem AS caixa, -valor FROM transferencia
                    ) mov
                    GROUP BY caixa;
                """)
                return {caixa: Decimal(total) for caixa, total in cur.fetchall()}
