# lavanderia/src/laundry/use_case/transfer_use_case.py

from decimal import Decimal

from loguru import logger

from laundry.domain.validators import validar_transferencia
from laundry.entities.transfer import CashPool, Transfer


class TransferUseCase:
    def __init__(self, repo):
        self.repo = repo

    def create_transfer(self, origem, destino, valor) -> Transfer:
        origem, destino, valor = validar_transferencia(origem, destino, valor)
        transfer = self.repo.create(Transfer(origem=origem, destino=destino, valor=valor))
        logger.info(f"💸 Transferência {transfer.id}: {origem.value} → {destino.value} R$ {valor}")
        return transfer

    def list_transfers(self) -> list[Transfer]:
        return self.repo.list_all()

    def balances(self) -> dict[str, Decimal]:
        saldos = self.repo.net_by_pool()
        return {pool.value: Decimal(saldos.get(pool.value, 0)).quantize(Decimal("0.01")) for pool in CashPool}
