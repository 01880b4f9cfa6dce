# lavanderia/src/authentication/infrastructure/user_repository.py

from psycopg2.extras import RealDictCursor

from database.db_connection import Database
from authentication.entities.user import User

_COLUNAS = "id, nome, email, senha_hash, role, ativo, criado_em, atualizado_em"


def _to_user(row) -> User | None:
    if not row:
        return None
    return User(**row)


class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    # =====================================================
    # 🔧 Estrutura da Tabela
    # =====================================================
    def create_table(self):
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS usuario (
                        id SERIAL PRIMARY KEY,
                        nome VARCHAR(255) NOT NULL,
                        email VARCHAR(255) NOT NULL,
                        senha_hash VARCHAR(255) NOT NULL,
                        role VARCHAR(20) NOT NULL DEFAULT 'SELLER'
                            CHECK (role IN ('ADMIN', 'SELLER')),
                        ativo BOOLEAN NOT NULL DEFAULT TRUE,
                        criado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        atualizado_em TIMESTAMP NOT NULL DEFAULT NOW(),
                        CONSTRAINT usuario_email_key UNIQUE (email)
                    );
                """)

    # =====================================================
    # 🧩 CRUD
    # =====================================================
    def create(self, user: User) -> User:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    INSERT INTO usuario (nome, email, senha_hash, role, ativo)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {_COLUNAS};
                """, (user.nome, user.email, user.senha_hash, user.role.value, user.ativo))
                return _to_user(cur.fetchone())

    def find_by_id(self, user_id: int) -> User | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM usuario WHERE id = %s;", (user_id,))
                return _to_user(cur.fetchone())

    def find_by_email(self, email: str) -> User | None:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM usuario WHERE email = %s;", (email.strip().lower(),))
                return _to_user(cur.fetchone())

    def list_all(self) -> list[User]:
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"SELECT {_COLUNAS} FROM usuario ORDER BY criado_em DESC, id DESC;")
                return [_to_user(row) for row in cur.fetchall()]

    def exists_active_admin(self) -> bool:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT EXISTS (SELECT 1 FROM usuario WHERE role = 'ADMIN' AND ativo);")
                return cur.fetchone()[0]

    def update(self, user: User) -> User:
        """Atualiza todos os campos editáveis do usuário."""
        with self.db.connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(f"""
                    UPDATE usuario
                    SET nome = %s,
                        email = %s,
                        senha_hash = %s,
                        role = %s,
                        ativo = %s,
                        atualizado_em = NOW()
                    WHERE id = %s
                    RETURNING {_COLUNAS};
                """, (user.nome, user.email, user.senha_hash, user.role.value, user.ativo, user.id))
                return _to_user(cur.fetchone())

    def delete(self, user_id: int) -> bool:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM usuario WHERE id = %s;", (user_id,))
                return cur.rowcount > 0
