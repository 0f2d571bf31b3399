"""
Pytest fixtures и конфигурация для тестов
"""
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio


# Добавляем корневую директорию в PYTHONPATH
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from marketplace.core.constants import VoteRepeatPolicy
from marketplace.database import ORMDatabase
from marketplace.repositories import OrderRepository, ServiceRepository
from marketplace.services import OrderWorkflow, ServiceFactory


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncGenerator[ORMDatabase, None]:
    """
    Фикстура для тестовой базы данных

    Файл, а не :memory:, чтобы параллельные сессии видели одну БД.
    """
    database = ORMDatabase(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.connect()
    await database.create_tables()
    yield database
    await database.disconnect()


@pytest.fixture
def factory(db: ORMDatabase) -> ServiceFactory:
    """Фабрика сервисов без проверки права голоса за услугу"""
    return ServiceFactory(
        db, vote_policy=VoteRepeatPolicy.TOGGLE, service_vote_requires_order=False
    )


@pytest.fixture
def order_repo(factory: ServiceFactory) -> OrderRepository:
    return factory.order_repository


@pytest.fixture
def service_repo(factory: ServiceFactory) -> ServiceRepository:
    return factory.service_repository


@pytest.fixture
def workflow(factory: ServiceFactory) -> OrderWorkflow:
    return factory.order_workflow


@pytest.fixture
def author_id() -> str:
    """ID автора услуги"""
    return "author-1"


@pytest.fixture
def customer_id() -> str:
    """ID заказчика"""
    return "customer-1"


@pytest_asyncio.fixture
async def service_id(service_repo: ServiceRepository, author_id: str) -> str:
    """Услуга, принадлежащая author_id"""
    return await service_repo.create(author_id, "Ремонт стиральных машин", service_id="service-1")


@pytest_asyncio.fixture
async def pending_order(workflow: OrderWorkflow, service_id: str, customer_id: str):
    """Новый заказ в статусе Pending"""
    return await workflow.place_order(
        {"service_id": service_id, "customer_id": customer_id, "message": "Нужен ремонт"}
    )


@pytest_asyncio.fixture
async def accepted_order(workflow: OrderWorkflow, pending_order):
    """Заказ, принятый автором"""
    return await workflow.accept_order(pending_order.id)
