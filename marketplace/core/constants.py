"""
Константы приложения - статусы заказов, роли сторон, типы объектов голосования
"""


class OrderStatus:
    """Статусы заказов"""

    PENDING = "Pending"  # Заказ предложен, ждёт решения автора
    ACCEPTED = "Accepted"  # Принят, ждёт подтверждения сторон
    REFUSED = "Refused"  # Отклонён
    CONFIRMED = "Confirmed"  # Обе стороны подтвердили выполнение

    @classmethod
    def all_statuses(cls) -> list[str]:
        """Список всех статусов"""
        return [cls.PENDING, cls.ACCEPTED, cls.REFUSED, cls.CONFIRMED]

    @classmethod
    def get_status_name(cls, status: str) -> str:
        """Получение названия статуса на русском"""
        names = {
            cls.PENDING: "Ожидает",
            cls.ACCEPTED: "Принят",
            cls.REFUSED: "Отклонён",
            cls.CONFIRMED: "Завершён",
        }
        return names.get(status, status)


class PartyRole:
    """Роль пользователя по отношению к заказу"""

    AUTHOR = "author"  # Автор услуги (исполнитель)
    CUSTOMER = "customer"  # Заказчик
    NONE = "none"  # Не участник заказа

    @classmethod
    def party_roles(cls) -> list[str]:
        """Роли, которые могут подтверждать заказ"""
        return [cls.AUTHOR, cls.CUSTOMER]

    @classmethod
    def confirmation_field(cls, role: str) -> str:
        """
        Имя флага подтверждения для роли

        Args:
            role: Роль стороны

        Returns:
            Имя поля заказа
        """
        fields = {
            cls.AUTHOR: "author_confirmed",
            cls.CUSTOMER: "customer_confirmed",
        }
        if role not in fields:
            raise KeyError(role)
        return fields[role]


class SubjectKind:
    """Типы объектов, за которые можно голосовать"""

    BLOG_POST = "blog_post"
    SERVICE = "service"

    @classmethod
    def all_kinds(cls) -> list[str]:
        """Список всех типов"""
        return [cls.BLOG_POST, cls.SERVICE]


class VoteRepeatPolicy:
    """Поведение при повторном голосе той же полярности"""

    TOGGLE = "toggle"  # Повторный голос снимает предыдущий
    KEEP = "keep"  # Повторный голос ничего не меняет


# Ограничения на текстовые поля
MAX_ORDER_MESSAGE_LENGTH = 2000
MAX_ID_LENGTH = 64
