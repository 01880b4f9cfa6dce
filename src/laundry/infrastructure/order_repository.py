# lavanderia/src/laundry/infrastructure/order_repository.py

from datetime import datetime
from decimal import Decimal
from typing import Iterable

from psycopg2.extras import RealDictCursor, execute_values

from database.db_connection import Database
from laundry.entities.order import Order, OrderItem, OrderStatus

_SELECT_PEDIDO = """
    SELECT p.id, p.cliente_id, p.vendedor_id, p.status, p.preco_total, p.desconto,
           p.forma_pagamento, p.observacoes, p.criado_em, p.atualizado_em,
           c.nome AS cliente_nome, c.telefone AS cliente_telefone,
           u.nome AS vendedor_nome
    FROM pedido p
    JOIN cliente c ON c.id = p.cliente_id
    JOIN usuario u ON u.id = p.vendedor_id
"""


def _to_order(row, itens: list[OrderItem]) -> Order:
    return Order(**row, itens=itens)


def _carregar_itens(cur, pedido_ids: list[int]) -> dict[int, list[OrderItem]]:
    por_pedido = {pid: [] for pid in pedido_ids}
    if not pedido_ids:
        return por_pedido
    cur.execute("""
        SELECT i.id, i.pedido_id, i.servico_id, i.quantidade, i.preco, i.subtotal,
               s.nome AS servico_nome
        FROM pedido_item i
        JOIN servico s ON s.id = i.servico_id
        WHERE i.pedido_id = ANY(%s)
        ORDER BY i.id;
    """, (list(pedido_ids),))
    for row in cur.fetchall():
        por_pedido[row["pedido_id"]].append(OrderItem(**row))
    return por_pedido


def _inserir_itens(cur, pedido_id: int, itens: list[OrderItem]):
    execute_values(cur, """
        INSERT INTO pedido_item (pedido_id, servico_id, quantidade, preco, subtotal)
        VALUES %s;
    """, [(pedido_id, i.servico_id, i.quantidade, i.preco, i.subtotal) for i in itens])


class OrderRepository:
    def __init__(self, db: Database):
        self.db = db

    # =====================================================
    # 🧩 Estrutura das Tabelas
    # =====================================================
    def create_table(self):
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS pedido (
                        id SERIAL PRIMARY KEY,
                        cliente_id INT NOT NULL REFERENCES cliente(id) ON DELETE RESTRICT,
                        vendedor_id INT NOT NULL REFERENCES usuario(id) ON DELETE RESTRICT,
                        status VARCHAR(20) NOT NULL DEFAULT 'PENDING',
                        preco_total NUMERIC(12, 2) NOT NULL DEFAULT 0 CHECK (preco_total >= 0),
                        desconto NUMERIC(12, 2) CHECK (desconto >= 0),
                        forma_pagamento VARCHAR(20),
                        observacoes TEXT,
                        criado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        atualizado_em TIMESTAMP NOT NULL DEFAULT NOW()
                    );

                    CREATE TABLE IF NOT EXISTS pedido_item (
                        id SERIAL PRIMARY KEY,
                        pedido_id INT NOT NULL REFERENCES pedido(id) ON DELETE CASCADE,
                        servico_id INT NOT NULL REFERENCES servico(id) ON DELETE RESTRICT,
                        quantidade INT NOT NULL CHECK (quantidade >= 1),
                        preco NUMERIC(12, 2) NOT NULL,
                        subtotal NUMERIC(12, 2) NOT NULL
                    );

                    CREATE INDEX IF NOT EXISTS idx_pedido_criado_em ON pedido (criado_em);
                    CREATE INDEX IF NOT EXISTS idx_pedido_vendedor ON pedido (vendedor_id);
                    CREATE INDEX IF NOT EXISTS idx_pedido_item_pedido ON pedido_item (pedido_id);
                """)

    # =====================================================
    # 💾 Escrita (pedido + itens na mesma transação)
    # =====================================================
    def create_with_items(self, order: Order) -> Order:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    INSERT INTO pedido (cliente_id, vendedor_id, status, preco_total, desconto,
                                        forma_pagamento, observacoes)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING id;
                """, (
                    order.cliente_id,
                    order.vendedor_id,
                    order.status.value,
                    order.preco_total,
                    order.desconto,
                    order.forma_pagamento.value if order.forma_pagamento else None,
                    order.observacoes,
                ))
                pedido_id = cur.fetchone()["id"]
                _inserir_itens(cur, pedido_id, order.itens)
                return self._find(cur, pedido_id)

    def save(self, order: Order, replace_items: bool = False) -> Order:
        """
        Grava os campos do pedido; com replace_items, apaga e recria os itens
        na mesma transação.
        """
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    UPDATE pedido
                    SET cliente_id = %s,
                        status = %s,
                        preco_total = %s,
                        desconto = %s,
                        forma_pagamento = %s,
                        observacoes = %s,
                        atualizado_em = NOW()
                    WHERE id = %s;
                """, (
                    order.cliente_id,
                    order.status.value,
                    order.preco_total,
                    order.desconto,
                    order.forma_pagamento.value if order.forma_pagamento else None,
                    order.observacoes,
                    order.id,
                ))
                if replace_items:
                    cur.execute("DELETE FROM pedido_item WHERE pedido_id = %s;", (order.id,))
                    _inserir_itens(cur, order.id, order.itens)
                return self._find(cur, order.id)

    def delete(self, order_id: int) -> bool:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM pedido WHERE id = %s;", (order_id,))
                return cur.rowcount > 0

    # =====================================================
    # 🔍 Leitura
    # =====================================================
    def _find(self, cur, order_id: int) -> Order | None:
        cur.execute(_SELECT_PEDIDO + " WHERE p.id = %s;", (order_id,))
        row = cur.fetchone()
        if not row:
            return None
        return _to_order(row, _carregar_itens(cur, [order_id])[order_id])

    def find_by_id(self, order_id: int) -> Order | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                return self._find(cur, order_id)

    def list_all(
        self,
        status: OrderStatus | None = None,
        vendedor_id: int | None = None,
        cliente_id: int | None = None,
        criado_de: datetime | None = None,
        criado_ate: datetime | None = None,
    ) -> list[Order]:
        where, params = _filtros(
            status=status,
            vendedor_id=vendedor_id,
            cliente_id=cliente_id,
            criado_de=criado_de,
            criado_ate=criado_ate,
        )
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(_SELECT_PEDIDO + where + " ORDER BY p.criado_em DESC, p.id DESC;", params)
                rows = cur.fetchall()
                itens = _carregar_itens(cur, [r["id"] for r in rows])
                return [_to_order(r, itens[r["id"]]) for r in rows]

    # =====================================================
    # 📊 Agregados para os painéis
    # =====================================================
    def count(
        self,
        status: OrderStatus | None = None,
        excluir_status: Iterable[OrderStatus] | None = None,
        vendedor_id: int | None = None,
        criado_de: datetime | None = None,
    ) -> int:
        where, params = _filtros(
            status=status,
            excluir_status=excluir_status,
            vendedor_id=vendedor_id,
            criado_de=criado_de,
        )
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT COUNT(*) FROM pedido p" + where + ";", params)
                return cur.fetchone()[0]

    def sum_total(self, vendedor_id: int | None = None, criado_de: datetime | None = None) -> Decimal:
        where, params = _filtros(vendedor_id=vendedor_id, criado_de=criado_de)
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT COALESCE(SUM(p.preco_total), 0) FROM pedido p" + where + ";", params)
                return Decimal(cur.fetchone()[0])


def _filtros(
    status=None,
    excluir_status=None,
    vendedor_id=None,
    cliente_id=None,
    criado_de=None,
    criado_ate=None,
) -> tuple[str, list]:
    filtros, params = [], []
    if status is not None:
        filtros.append("p.status = %s")
        params.append(OrderStatus(status).value)
    if excluir_status:
        filtros.append("p.status <> ALL(%s)")
        params.append([OrderStatus(s).value for s in excluir_status])
    if vendedor_id is not None:
        filtros.append("p.vendedor_id = %s")
        params.append(vendedor_id)
    if cliente_id is not None:
        filtros.append("p.cliente_id = %s")
        params.append(cliente_id)
    if criado_de is not None:
        filtros.append("p.criado_em >= %s")
        params.append(criado_de)
    if criado_ate is not None:
        filtros.append("p.criado_em <= %s")
        params.append(criado_ate)
    where = f" WHERE {' AND '.join(filtros)}" if filtros else ""
    return where, params
