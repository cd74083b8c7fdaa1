"""
Domain errors — иерархия исключений ядра

Все ошибки поднимаются синхронно вызывающему коду мутирующей операции.
Внутренних повторов нет: в in-memory ядре не существует transient-ошибок.

Таксономия:
- ValidationError: некорректный ввод, агрегат не изменён
- InsufficientStock: списание превышает текущий остаток
- NotFound: идентификатор Order/Employee/Inventory не найден
- DuplicateIdentity: коллизия order number / employee code / item code
"""


class CateringDomainError(Exception):
    """Базовый класс всех доменных ошибок."""


class ValidationError(CateringDomainError, ValueError):
    """
    Некорректный ввод (например, отрицательное количество).

    Поднимается ДО мутации: агрегат остаётся без изменений.
    """


class InsufficientStock(CateringDomainError):
    """
    Списание превышает текущий остаток на складе.

    Восстановимое условие: остаток не изменён, вызывающий код
    может пополнить склад и повторить операцию.
    """

    def __init__(self, item_code: str, requested: int, available: int):
        self.item_code = item_code
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {item_code}: requested={requested}, available={available}"
        )


class NotFound(CateringDomainError, LookupError):
    """Идентификатор сущности не разрешается."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class DuplicateIdentity(CateringDomainError):
    """Коллизия уникального идентификатора при создании."""

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} already exists: {key}")
