"""
SQLAlchemy ORM модели для базы данных
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Базовый класс для всех моделей"""


class Order(Base):
    """Модель заказа в SQLAlchemy"""

    __tablename__ = "orders"

    # Основные поля
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    service_id: Mapped[str] = mapped_column(String(64), nullable=False)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Подтверждения сторон
    author_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    customer_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Временные метки
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    accepted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Optimistic locking
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    __table_args__ = (
        Index("idx_orders_author_id", "author_id"),
        Index("idx_orders_customer_id", "customer_id"),
        Index("idx_orders_service_id", "service_id"),
        Index("idx_orders_status", "status"),
        CheckConstraint(
            "status IN ('Pending', 'Accepted', 'Refused', 'Confirmed')",
            name="chk_orders_status",
        ),
        CheckConstraint("author_id <> customer_id", name="chk_orders_distinct_parties"),
        CheckConstraint(
            "(status = 'Confirmed') = (completed_at IS NOT NULL)",
            name="chk_orders_completed_at",
        ),
    )


class Vote(Base):
    """Голос за пост или услугу"""

    __tablename__ = "votes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    subject_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    is_upvote: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        # Не больше одного голоса пользователя за объект
        UniqueConstraint(
            "subject_kind", "subject_id", "user_id", name="uq_votes_subject_user"
        ),
        Index("idx_votes_subject", "subject_kind", "subject_id"),
        CheckConstraint(
            "subject_kind IN ('blog_post', 'service')", name="chk_votes_subject_kind"
        ),
    )


class Service(Base):
    """Услуга (владелец - внешний модуль каталога), кэширует счётчики голосов"""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_services_owner_id", "owner_id"),
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="chk_services_counters"),
    )


class BlogPost(Base):
    """Пост блога (владелец - внешний модуль блога)"""

    __tablename__ = "blog_posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
