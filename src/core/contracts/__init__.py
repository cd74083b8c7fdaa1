"""
Contract Validation Module

JSON Schema контракты агрегатов кейтеринга (Order, Inventory, Employee, Task).
"""

from .validators import (
    ContractValidator,
    EmployeeContractValidator,
    InventoryContractValidator,
    OrderContractValidator,
    TaskContractValidator,
    load_schema,
    to_payload,
    validate_employee,
    validate_inventory,
    validate_order,
    validate_task,
)

__all__ = [
    # Schemas
    "load_schema",
    "to_payload",
    # Classes
    "ContractValidator",
    "OrderContractValidator",
    "InventoryContractValidator",
    "EmployeeContractValidator",
    "TaskContractValidator",
    # Functions
    "validate_order",
    "validate_inventory",
    "validate_employee",
    "validate_task",
]
