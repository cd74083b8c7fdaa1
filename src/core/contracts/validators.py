"""
JSON Schema контракты агрегатов кейтеринга.

Контракт описывает сериализованную форму агрегата (model_dump(mode="json")),
которую ядро отдаёт внешнему слою хранения/HTTP. Денежные суммы в контракте —
строки с не более чем двумя знаками после запятой.

Схемы поставляются внутри пакета (schema/*.json) и загружаются лениво
при первом обращении.
"""

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Iterator, Union

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel

from src.core.domain.employee import Employee
from src.core.domain.inventory import Inventory
from src.core.domain.order import Order
from src.core.domain.task import Task

Payload = Union[BaseModel, dict[str, Any]]

SCHEMA_PACKAGE = "src.core.contracts"


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> dict[str, Any]:
    """
    Загрузка и meta-валидация схемы schema/<schema_name>.json.

    Raises:
        FileNotFoundError: схемы нет в пакете
        ValueError: файл не является корректной Draft 2020-12 схемой
    """
    resource = resources.files(SCHEMA_PACKAGE).joinpath("schema").joinpath(f"{schema_name}.json")
    if not resource.is_file():
        raise FileNotFoundError(f"Contract schema not packaged: {schema_name}.json")

    schema = json.loads(resource.read_text(encoding="utf-8"))
    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid contract schema {schema_name}.json: {e.message}") from e
    return schema


def to_payload(data: Payload) -> dict[str, Any]:
    """Модель → JSON-совместимый dict; dict возвращается как есть."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    return data


class ContractValidator:
    """
    Проверка агрегата против его контракта.

    Принимает как pydantic-модель, так и уже сериализованный dict.
    Подклассы задают schema_name и model_type.
    """

    schema_name: str
    model_type: type[BaseModel]

    def __init__(self):
        self.validator = Draft202012Validator(load_schema(self.schema_name))

    def validate(self, data: Payload) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое найденное нарушение
            TypeError: передана модель другого типа
        """
        self.validator.validate(self._payload(data))

    def is_valid(self, data: Payload) -> bool:
        return self.validator.is_valid(self._payload(data))

    def iter_errors(self, data: Payload) -> Iterator[jsonschema.ValidationError]:
        return self.validator.iter_errors(self._payload(data))

    def error_messages(self, data: Payload) -> list[str]:
        """Все нарушения в виде 'путь: сообщение', отсортированные по пути."""
        messages = []
        for error in self.iter_errors(data):
            path = "/".join(str(p) for p in error.absolute_path) or "<root>"
            messages.append(f"{path}: {error.message}")
        return sorted(messages)

    def _payload(self, data: Payload) -> dict[str, Any]:
        if isinstance(data, BaseModel) and not isinstance(data, self.model_type):
            raise TypeError(
                f"{self.schema_name} contract expects {self.model_type.__name__}, got {type(data).__name__}"
            )
        return to_payload(data)


class OrderContractValidator(ContractValidator):
    schema_name = "order"
    model_type = Order


class InventoryContractValidator(ContractValidator):
    schema_name = "inventory"
    model_type = Inventory


class EmployeeContractValidator(ContractValidator):
    schema_name = "employee"
    model_type = Employee


class TaskContractValidator(ContractValidator):
    schema_name = "task"
    model_type = Task


def validate_order(data: Payload) -> None:
    """Raises jsonschema.ValidationError если Order не соответствует контракту."""
    OrderContractValidator().validate(data)


def validate_inventory(data: Payload) -> None:
    InventoryContractValidator().validate(data)


def validate_employee(data: Payload) -> None:
    EmployeeContractValidator().validate(data)


def validate_task(data: Payload) -> None:
    TaskContractValidator().validate(data)
