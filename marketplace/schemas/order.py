"""Pydantic схемы для валидации заказов (Orders)"""
import re

from pydantic import BaseModel, Field, field_validator, model_validator

from marketplace.core.config import Config as AppConfig
from marketplace.core.constants import MAX_ID_LENGTH, PartyRole


# Идентификаторы: UUID или другие строковые ключи без пробелов
ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-:.]+$")


def validate_identifier(v: str, field_name: str) -> str:
    """
    Общая проверка идентификатора

    Args:
        v: Значение
        field_name: Имя поля для сообщения об ошибке

    Returns:
        Идентификатор без пробелов по краям
    """
    v = v.strip()
    if not v:
        raise ValueError(f"Поле {field_name} обязательно для заполнения")
    if not ID_PATTERN.match(v):
        raise ValueError(f"Поле {field_name} содержит недопустимые символы")
    return v


class OrderCreateSchema(BaseModel):
    """Схема для создания заказа"""

    service_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH, description="ID услуги")
    customer_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH, description="ID заказчика")
    author_id: str | None = Field(
        None,
        max_length=MAX_ID_LENGTH,
        description="ID автора услуги (если не задан - берётся владелец услуги)",
    )
    message: str = Field(
        "", max_length=AppConfig.ORDER_MESSAGE_MAX_LENGTH, description="Сообщение заказчика"
    )

    @field_validator("service_id", "customer_id")
    @classmethod
    def validate_required_ids(cls, v: str, info) -> str:
        """Обязательные идентификаторы"""
        return validate_identifier(v, info.field_name)

    @field_validator("author_id")
    @classmethod
    def validate_author_id(cls, v: str | None) -> str | None:
        """Автор необязателен, пустая строка считается отсутствием"""
        if v is None or not v.strip():
            return None
        return validate_identifier(v, "author_id")

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Сообщение к заказу"""
        return v.strip()

    @model_validator(mode="after")
    def validate_parties(self):
        """Автор и заказчик - разные пользователи"""
        if self.author_id is not None and self.author_id == self.customer_id:
            raise ValueError("Автор и заказчик не могут совпадать")
        return self

    class Config:
        """Конфигурация Pydantic схемы"""

        str_strip_whitespace = True  # Автоматически убирать пробелы
        from_attributes = True  # Поддержка ORM моделей


class OrderConfirmSchema(BaseModel):
    """Схема подтверждения выполнения заказа стороной"""

    order_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH)
    role: str = Field(..., description="author или customer")
    caller_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH)

    @field_validator("order_id", "caller_id")
    @classmethod
    def validate_ids(cls, v: str, info) -> str:
        return validate_identifier(v, info.field_name)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        """Роль без учёта регистра: author / customer"""
        role = v.strip().lower()
        if role not in PartyRole.party_roles():
            raise ValueError(
                f"Недопустимая роль '{v}'. Допустимые: {', '.join(PartyRole.party_roles())}"
            )
        return role

    class Config:
        str_strip_whitespace = True
