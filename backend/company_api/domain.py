from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple


class CompanyType(str, Enum):
    CORPORATIONS = "Corporations"
    NON_PROFIT = "NonProfit"
    COOPERATIVE = "Cooperative"
    SOLE_PROPRIETOR = "Sole Proprietorship"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return value in {t.value for t in cls}


@dataclass(frozen=True)
class Company:
    """
    Registro de empresa independente do ORM.
    `type` fica como string crua: a validação decide se é um CompanyType.
    """
    id: str
    name: str
    amount_of_employees: int
    registered: bool
    type: str
    description: Optional[str] = None


# Campos que o PATCH pode alterar. Validação e persistência usam a mesma tabela.
PATCHABLE_FIELDS: Tuple[str, ...] = (
    "name",
    "description",
    "amount_of_employees",
    "registered",
    "type",
)


@dataclass(frozen=True)
class CompanyPatch:
    name: Optional[str] = None
    description: Optional[str] = None
    amount_of_employees: Optional[int] = None
    registered: Optional[bool] = None
    type: Optional[str] = None

    def set_fields(self) -> List[Tuple[str, Any]]:
        """Pares (campo, valor) dos campos não nulos, na ordem de PATCHABLE_FIELDS."""
        return [(f, getattr(self, f)) for f in PATCHABLE_FIELDS if getattr(self, f) is not None]


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    password_hash: str
