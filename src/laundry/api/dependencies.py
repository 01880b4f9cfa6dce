# lavanderia/src/laundry/api/dependencies.py

from fastapi import Depends

from authentication.api.dependencies import get_database
from database.db_connection import Database
from laundry.infrastructure.customer_repository import CustomerRepository
from laundry.infrastructure.order_repository import OrderRepository
from laundry.infrastructure.service_repository import ServiceRepository
from laundry.infrastructure.transfer_repository import TransferRepository
from laundry.reporting.report_service import ReportService
from laundry.reporting.stats_service import StatsService
from laundry.use_case.customer_use_case import CustomerUseCase
from laundry.use_case.order_use_case import OrderUseCase
from laundry.use_case.service_use_case import ServiceUseCase
from laundry.use_case.transfer_use_case import TransferUseCase


def get_customer_use_case(db: Database = Depends(get_database)) -> CustomerUseCase:
    return CustomerUseCase(CustomerRepository(db), OrderRepository(db))


def get_service_use_case(db: Database = Depends(get_database)) -> ServiceUseCase:
    return ServiceUseCase(ServiceRepository(db))


def get_order_use_case(db: Database = Depends(get_database)) -> OrderUseCase:
    return OrderUseCase(OrderRepository(db), ServiceRepository(db), CustomerRepository(db))


def get_transfer_use_case(db: Database = Depends(get_database)) -> TransferUseCase:
    return TransferUseCase(TransferRepository(db))


def get_report_service(db: Database = Depends(get_database)) -> ReportService:
    return ReportService(OrderRepository(db))


def get_stats_service(db: Database = Depends(get_database)) -> StatsService:
    return StatsService(OrderRepository(db), CustomerRepository(db))
