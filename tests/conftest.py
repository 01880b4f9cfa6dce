"""Fixtures da suíte: repositórios em memória e cliente HTTP sem banco."""

import copy
import itertools
import threading
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from authentication.api.dependencies import get_user_use_case
from authentication.domain import auth_service as auth_module
from authentication.domain.auth_service import AuthService
from authentication.domain.roles import Role
from authentication.entities.user import User
from authentication.use_case.user_use_case import UserUseCase
from laundry.api.dependencies import (
    get_customer_use_case,
    get_order_use_case,
    get_report_service,
    get_service_use_case,
    get_stats_service,
    get_transfer_use_case,
)
from laundry.api.laundry_api import create_app
from laundry.entities.customer import Customer
from laundry.entities.order import OrderStatus
from laundry.entities.service import Service
from laundry.reporting.report_service import ReportService
from laundry.reporting.stats_service import StatsService
from laundry.use_case.customer_use_case import CustomerUseCase
from laundry.use_case.order_use_case import OrderUseCase
from laundry.use_case.service_use_case import ServiceUseCase
from laundry.use_case.transfer_use_case import TransferUseCase
from shared.errors import ConflictError

# bcrypt no custo mínimo para a suíte não ficar lenta
auth_module.BCRYPT_ROUNDS = 4


# ============================================================
# 🧪 Repositórios em memória (mesma interface dos repositórios PostgreSQL)
# ============================================================
class _MemoryRepo:
    def __init__(self):
        self.rows = {}
        self.lock = threading.Lock()
        self._ids = itertools.count(1)

    def create_table(self):
        pass

    def _insert(self, obj):
        obj = copy.deepcopy(obj)
        obj.id = next(self._ids)
        if hasattr(obj, "criado_em") and obj.criado_em is None:
            obj.criado_em = datetime.now()
        self.rows[obj.id] = obj
        return copy.deepcopy(obj)

    def find_by_id(self, obj_id):
        with self.lock:
            return copy.deepcopy(self.rows.get(obj_id))

    def delete(self, obj_id):
        with self.lock:
            return self.rows.pop(obj_id, None) is not None

    def update(self, obj):
        with self.lock:
            if obj.id not in self.rows:
                return None
            self.rows[obj.id] = copy.deepcopy(obj)
            return copy.deepcopy(obj)

    def _find_by(self, campo, valor):
        with self.lock:
            for obj in self.rows.values():
                if getattr(obj, campo) == valor:
                    return copy.deepcopy(obj)
        return None


class MemoryUserRepository(_MemoryRepo):
    def create(self, user):
        with self.lock:
            if any(u.email == user.email for u in self.rows.values()):
                raise ConflictError("Email já cadastrado")
            return self._insert(user)

    def find_by_email(self, email):
        return self._find_by("email", email.strip().lower())

    def list_all(self):
        with self.lock:
            return [copy.deepcopy(u) for u in self.rows.values()]

    def exists_active_admin(self):
        with self.lock:
            return any(u.role is Role.ADMIN and u.ativo for u in self.rows.values())


class MemoryCustomerRepository(_MemoryRepo):
    def create(self, customer):
        # Unicidade checada sob o lock, como a constraint UNIQUE do banco
        with self.lock:
            for c in self.rows.values():
                if c.telefone == customer.telefone:
                    raise ConflictError("Já existe um cliente com este telefone")
                if customer.email and c.email == customer.email:
                    raise ConflictError("Já existe um cliente com este e-mail")
            return self._insert(customer)

    def find_by_phone(self, telefone):
        return self._find_by("telefone", telefone)

    def find_by_email(self, email):
        return self._find_by("email", email)

    def list_all(self, incluir_inativos=False):
        with self.lock:
            return [copy.deepcopy(c) for c in self.rows.values() if incluir_inativos or c.ativo]

    def count(self, criado_desde=None):
        with self.lock:
            return sum(1 for c in self.rows.values() if criado_desde is None or c.criado_em >= criado_desde)


class MemoryServiceRepository(_MemoryRepo):
    def create(self, service):
        with self.lock:
            if any(s.nome == service.nome for s in self.rows.values()):
                raise ConflictError("Já existe um serviço com este nome")
            return self._insert(service)

    def find_by_name(self, nome):
        return self._find_by("nome", nome)

    def find_many(self, service_ids):
        with self.lock:
            return {i: copy.deepcopy(self.rows[i]) for i in service_ids if i in self.rows}

    def list_all(self):
        with self.lock:
            return [copy.deepcopy(s) for s in self.rows.values()]


class MemoryOrderRepository(_MemoryRepo):
    def __init__(self, customers=None, users=None):
        super().__init__()
        self.customers = customers
        self.users = users
        self._item_ids = itertools.count(1)

    def _preencher(self, order):
        for item in order.itens:
            item.pedido_id = order.id
            if item.id is None:
                item.id = next(self._item_ids)
        if self.customers and order.cliente_id in self.customers.rows:
            cliente = self.customers.rows[order.cliente_id]
            order.cliente_nome, order.cliente_telefone = cliente.nome, cliente.telefone
        if self.users and order.vendedor_id in self.users.rows:
            order.vendedor_nome = self.users.rows[order.vendedor_id].nome

    def create_with_items(self, order):
        with self.lock:
            order = copy.deepcopy(order)
            order.id = next(self._ids)
            order.criado_em = order.criado_em or datetime.now()
            self._preencher(order)
            self.rows[order.id] = order
            return copy.deepcopy(order)

    def save(self, order, replace_items=False):
        with self.lock:
            atual = self.rows[order.id]
            novo = copy.deepcopy(order)
            if replace_items:
                for item in novo.itens:
                    item.id = None
            else:
                novo.itens = atual.itens
            novo.criado_em = atual.criado_em
            novo.atualizado_em = datetime.now()
            self._preencher(novo)
            self.rows[order.id] = novo
            return copy.deepcopy(novo)

    def _filtra(self, status=None, excluir_status=None, vendedor_id=None, cliente_id=None,
                criado_de=None, criado_ate=None):
        for o in self.rows.values():
            if status is not None and o.status != OrderStatus(status):
                continue
            if excluir_status and o.status in excluir_status:
                continue
            if vendedor_id is not None and o.vendedor_id != vendedor_id:
                continue
            if cliente_id is not None and o.cliente_id != cliente_id:
                continue
            if criado_de is not None and o.criado_em < criado_de:
                continue
            if criado_ate is not None and o.criado_em > criado_ate:
                continue
            yield o

    def list_all(self, status=None, vendedor_id=None, cliente_id=None, criado_de=None, criado_ate=None):
        with self.lock:
            pedidos = self._filtra(status=status, vendedor_id=vendedor_id, cliente_id=cliente_id,
                                   criado_de=criado_de, criado_ate=criado_ate)
            return [copy.deepcopy(o) for o in sorted(pedidos, key=lambda o: (o.criado_em, o.id), reverse=True)]

    def count(self, status=None, excluir_status=None, vendedor_id=None, criado_de=None):
        with self.lock:
            return sum(1 for _ in self._filtra(status=status, excluir_status=excluir_status,
                                                vendedor_id=vendedor_id, criado_de=criado_de))

    def sum_total(self, vendedor_id=None, criado_de=None):
        with self.lock:
            return sum((o.preco_total for o in self._filtra(vendedor_id=vendedor_id, criado_de=criado_de)),
                       Decimal("0"))


class MemoryTransferRepository(_MemoryRepo):
    def create(self, transfer):
        with self.lock:
            return self._insert(transfer)

    def list_all(self):
        with self.lock:
            return [copy.deepcopy(t) for t in sorted(self.rows.values(), key=lambda t: t.id, reverse=True)]

    def net_by_pool(self):
        saldos = {}
        with self.lock:
            for t in self.rows.values():
                saldos[t.destino.value] = saldos.get(t.destino.value, Decimal("0")) + t.valor
                saldos[t.origem.value] = saldos.get(t.origem.value, Decimal("0")) - t.valor
        return saldos


class FakeDatabase:
    def close(self):
        pass


# ============================================================
# 🔧 Fixtures
# ============================================================
@pytest.fixture
def auth():
    return AuthService(secret_key="chave-de-teste", exp_hours=1)


@pytest.fixture
def users():
    return MemoryUserRepository()


@pytest.fixture
def customers():
    return MemoryCustomerRepository()


@pytest.fixture
def services():
    return MemoryServiceRepository()


@pytest.fixture
def orders(customers, users):
    return MemoryOrderRepository(customers, users)


@pytest.fixture
def transfers():
    return MemoryTransferRepository()


@pytest.fixture
def user_use_case(users, auth):
    return UserUseCase(users, auth)


@pytest.fixture
def order_use_case(orders, services, customers):
    return OrderUseCase(orders, services, customers)


@pytest.fixture
def catalogo(services):
    """Três serviços ativos e um inativo."""
    return {
        "lavar": services.create(Service(nome="Wash & Dry", preco=Decimal("5.00"))),
        "seco": services.create(Service(nome="Dry Cleaning", preco=Decimal("15.00"))),
        "passar": services.create(Service(nome="Iron Only", preco=Decimal("3.00"))),
        "inativo": services.create(Service(nome="Antigo", preco=Decimal("9.00"), ativo=False)),
    }


@pytest.fixture
def vendedor(users):
    return users.create(User(nome="Vendedor", email="vendedor@lavanderia.com", senha_hash="x", role=Role.SELLER))


@pytest.fixture
def admin(users):
    return users.create(User(nome="Admin", email="admin@lavanderia.com", senha_hash="x", role=Role.ADMIN))


@pytest.fixture
def cliente(customers):
    return customers.create(Customer(nome="Maria", telefone="11999990000", email="maria@email.com"))


@pytest.fixture
def app(auth, users, customers, services, orders, transfers):
    app = create_app(db=FakeDatabase(), auth=auth)
    app.dependency_overrides[get_user_use_case] = lambda: UserUseCase(users, auth)
    app.dependency_overrides[get_customer_use_case] = lambda: CustomerUseCase(customers, orders)
    app.dependency_overrides[get_service_use_case] = lambda: ServiceUseCase(services)
    app.dependency_overrides[get_order_use_case] = lambda: OrderUseCase(orders, services, customers)
    app.dependency_overrides[get_transfer_use_case] = lambda: TransferUseCase(transfers)
    app.dependency_overrides[get_report_service] = lambda: ReportService(orders)
    app.dependency_overrides[get_stats_service] = lambda: StatsService(orders, customers)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def token_for(auth):
    """Gera o header Authorization para um usuário."""

    def _token_for(user):
        token = auth.generate_token(user.id, user.email, user.nome, user.role.value)
        return {"Authorization": f"Bearer {token}"}

    return _token_for

