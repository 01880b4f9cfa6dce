# lavanderia/src/laundry/use_case/customer_use_case.py

from loguru import logger

from laundry.domain.validators import texto_obrigatorio, validar_cliente
from laundry.entities.customer import Customer
from shared.errors import ConflictError, NotFoundError


class CustomerUseCase:
    def __init__(self, repo, orders=None):
        self.repo = repo
        self.orders = orders

    def create_customer(self, nome, telefone, email=None, endereco=None) -> Customer:
        validar_cliente(nome, telefone)
        customer = Customer(nome=nome, telefone=telefone, email=email, endereco=endereco)

        if customer.email and self.repo.find_by_email(customer.email):
            raise ConflictError("Já existe um cliente com este e-mail")
        if self.repo.find_by_phone(customer.telefone):
            raise ConflictError("Já existe um cliente com este telefone")

        # A constraint UNIQUE do banco resolve criações simultâneas com o mesmo telefone
        customer = self.repo.create(customer)
        logger.info(f"🧺 Cliente {customer.nome} criado com ID {customer.id}")
        return customer

    def list_customers(self, incluir_inativos: bool = False) -> list[Customer]:
        return self.repo.list_all(incluir_inativos=incluir_inativos)

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.repo.find_by_id(customer_id)
        if not customer:
            raise NotFoundError("Cliente não encontrado")
        return customer

    def get_customer_with_orders(self, customer_id: int) -> tuple[Customer, list]:
        customer = self.get_customer(customer_id)
        pedidos = self.orders.list_all(cliente_id=customer_id) if self.orders else []
        return customer, pedidos

    def update_customer(self, customer_id: int, alteracoes: dict) -> Customer:
        """
        alteracoes: nome, telefone, email, endereco, ativo, apenas os enviados.
        email nulo ou vazio limpa o e-mail.
        """
        customer = self.get_customer(customer_id)

        if "nome" in alteracoes:
            customer.nome = texto_obrigatorio(alteracoes["nome"], "Nome é obrigatório")

        if "telefone" in alteracoes:
            telefone = texto_obrigatorio(alteracoes["telefone"], "Telefone é obrigatório")
            if telefone != customer.telefone:
                outro = self.repo.find_by_phone(telefone)
                if outro and outro.id != customer_id:
                    raise ConflictError("Já existe um cliente com este telefone")
            customer.telefone = telefone

        if "email" in alteracoes:
            email = (alteracoes["email"] or "").strip().lower() or None
            if email and email != customer.email:
                outro = self.repo.find_by_email(email)
                if outro and outro.id != customer_id:
                    raise ConflictError("Já existe um cliente com este e-mail")
            customer.email = email

        if "endereco" in alteracoes:
            customer.endereco = (alteracoes["endereco"] or "").strip()

        if alteracoes.get("ativo") is not None:
            customer.ativo = bool(alteracoes["ativo"])

        customer = self.repo.update(customer)
        logger.info(f"✏️ Cliente {customer_id} atualizado")
        return customer

    def delete_customer(self, customer_id: int):
        # Pedidos referenciando o cliente bloqueiam a exclusão (FK RESTRICT → ConflictError)
        if not self.repo.delete(customer_id):
            raise NotFoundError("Cliente não encontrado")
        logger.info(f"🗑️ Cliente {customer_id} excluído")
