"""
Командная строка ядра маркетплейса

    python -m marketplace.cli init-db
    python -m marketplace.cli orders <user_id>
    python -m marketplace.cli score <service|blog_post> <subject_id>
"""

import argparse
import asyncio
import logging
import sys

from marketplace.core.constants import OrderStatus, SubjectKind
from marketplace.core.logging_config import setup_logging
from marketplace.database import ORMDatabase
from marketplace.domain.exceptions import MarketplaceError
from marketplace.services.service_factory import ServiceFactory
from marketplace.utils.sentry import init_sentry


logger = logging.getLogger(__name__)


async def init_db(db: ORMDatabase, args: argparse.Namespace) -> int:
    """Создание таблиц по ORM моделям"""
    await db.create_tables()
    print("✅ Таблицы созданы")
    return 0


async def show_orders(db: ORMDatabase, args: argparse.Namespace) -> int:
    """Заказы пользователя (как автора и как заказчика)"""
    workflow = ServiceFactory(db).order_workflow
    orders = await workflow.get_orders_for_user(args.user_id)
    if not orders:
        print(f"У пользователя {args.user_id} нет заказов")
        return 0

    for order in orders:
        side = "автор" if order.author_id == args.user_id else "заказчик"
        flags = f"A:{int(order.author_confirmed)} C:{int(order.customer_confirmed)}"
        print(
            f"#{order.id}  {OrderStatus.get_status_name(order.status):<12} "
            f"{side:<9} услуга {order.service_id}  {flags}"
        )
    print(f"Всего: {len(orders)}")
    return 0


async def show_score(db: ORMDatabase, args: argparse.Namespace) -> int:
    """Рейтинг объекта по голосам"""
    ledger = ServiceFactory(db).ledger_for(args.kind)
    tally = await ledger.get_tally(args.subject_id)
    print(f"{args.kind} #{args.subject_id}: {tally.score} (+{tally.upvotes} / -{tally.downvotes})")
    return 0


COMMANDS = {
    "init-db": init_db,
    "orders": show_orders,
    "score": show_score,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Заказы и голосования маркетплейса")
    parser.add_argument(
        "--database-url",
        "-d",
        type=str,
        default=None,
        help="URL базы данных (по умолчанию DATABASE_URL / DATABASE_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Создать таблицы")

    orders = subparsers.add_parser("orders", help="Заказы пользователя")
    orders.add_argument("user_id", type=str, help="ID пользователя")

    score = subparsers.add_parser("score", help="Рейтинг объекта")
    score.add_argument("kind", choices=SubjectKind.all_kinds(), help="Тип объекта")
    score.add_argument("subject_id", type=str, help="ID объекта")

    return parser


async def run(args: argparse.Namespace) -> int:
    db = ORMDatabase(args.database_url)
    await db.connect()
    try:
        return await COMMANDS[args.command](db, args)
    except MarketplaceError as e:
        logger.error(f"Команда {args.command} завершилась ошибкой: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        await db.disconnect()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    init_sentry()
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
