# lavanderia/src/laundry/use_case/service_use_case.py

from loguru import logger

from laundry.domain.validators import texto_obrigatorio, validar_servico, valor_nao_negativo
from laundry.entities.service import Service
from shared.errors import ConflictError, NotFoundError

SERVICOS_INICIAIS = [
    {"nome": "Wash & Dry", "descricao": "Complete washing and drying service", "preco": "5.00"},
    {"nome": "Dry Cleaning", "descricao": "Professional dry cleaning service", "preco": "15.00"},
    {"nome": "Iron Only", "descricao": "Ironing service for clean clothes", "preco": "3.00"},
    {"nome": "Wash Only", "descricao": "Washing service without drying", "preco": "3.50"},
]


class ServiceUseCase:
    def __init__(self, repo):
        self.repo = repo

    def create_service(self, nome, preco, comissao=None, descricao=None) -> Service:
        nome, preco, comissao = validar_servico(nome, preco, comissao)
        if self.repo.find_by_name(nome):
            raise ConflictError("Já existe um serviço com este nome")

        service = self.repo.create(Service(nome=nome, preco=preco, comissao=comissao, descricao=descricao or ""))
        logger.info(f"🧼 Serviço {service.nome} criado (R$ {service.preco})")
        return service

    def seed_services(self) -> list[Service]:
        criados = []
        for dados in SERVICOS_INICIAIS:
            if self.repo.find_by_name(dados["nome"]):
                logger.info(f"⏭️ Serviço {dados['nome']} já existe")
                continue
            criados.append(self.create_service(**dados))
        return criados

    def list_services(self) -> list[Service]:
        return self.repo.list_all()

    def get_service(self, service_id: int) -> Service:
        service = self.repo.find_by_id(service_id)
        if not service:
            raise NotFoundError("Serviço não encontrado")
        return service

    def update_service(self, service_id: int, alteracoes: dict) -> Service:
        """
        alteracoes: nome, descricao, preco, comissao, ativo, apenas os enviados.
        Mudança de preço não altera itens de pedidos já gravados.
        """
        service = self.get_service(service_id)

        if "nome" in alteracoes:
            nome = texto_obrigatorio(alteracoes["nome"], "Nome é obrigatório")
            if nome != service.nome:
                outro = self.repo.find_by_name(nome)
                if outro and outro.id != service_id:
                    raise ConflictError("Já existe um serviço com este nome")
            service.nome = nome

        if "descricao" in alteracoes:
            service.descricao = alteracoes["descricao"] or ""

        if alteracoes.get("preco") is not None:
            service.preco = valor_nao_negativo(alteracoes["preco"], "Preço")

        if alteracoes.get("comissao") is not None:
            service.comissao = valor_nao_negativo(alteracoes["comissao"], "Comissão")

        if alteracoes.get("ativo") is not None:
            service.ativo = bool(alteracoes["ativo"])

        service = self.repo.update(service)
        logger.info(f"✏️ Serviço {service_id} atualizado (ativo={service.ativo})")
        return service

    def delete_service(self, service_id: int):
        # Itens de pedido referenciando o serviço bloqueiam a exclusão; desative-o
        if not self.repo.delete(service_id):
            raise NotFoundError("Serviço não encontrado")
        logger.info(f"🗑️ Serviço {service_id} excluído")
