from __future__ import annotations

import logging
import re
import threading
from contextlib import contextmanager
from dataclasses import asdict, replace
from typing import Dict, Iterator, Protocol

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from company_api.core.errors import InternalError, InvalidInputError, NotFoundError, UniquenessViolation
from company_api.domain import Company, CompanyPatch
from company_api.models.company import CompanyRow

logger = logging.getLogger(__name__)

NAME_TAKEN = "name already exists"
COMPANY_EXISTS = "company already exists"

# SQLite: "companies.name"; MySQL: chave "ix_companies_name"
_NAME_KEY = re.compile(r"companies\.name|ix_companies_name")


# -----------------------------
# Contrato: store de empresas
# -----------------------------

class CompanyStore(Protocol):
    def get_by_id(self, company_id: str) -> Company:
        """NotFoundError quando não existe registro com esse id."""
        ...

    def create(self, company: Company) -> Company:
        """Persiste como veio. UniquenessViolation se o nome (ou id) já existe."""
        ...

    def delete_by_id(self, company_id: str) -> None:
        """NotFoundError quando nenhuma linha foi afetada."""
        ...

    def patch_by_id(self, company_id: str, patch: CompanyPatch) -> None:
        """
        Altera só os campos não nulos de `patch`.
        NotFoundError quando nenhuma linha casou, UniquenessViolation se o nome
        já existe.
        """
        ...


def _collision_detail(e: IntegrityError) -> str:
    return NAME_TAKEN if _NAME_KEY.search(str(e.orig)) else COMPANY_EXISTS


def _to_domain(row: CompanyRow) -> Company:
    return Company(
        id=row.id,
        name=row.name,
        description=row.description,
        amount_of_employees=row.amount_of_employees,
        registered=row.registered,
        type=row.type,
    )


class SqlCompanyStore:
    """
    Store SQLAlchemy (uma Session por request).

    NotFound vem do rowcount do próprio UPDATE/DELETE (sem SELECT antes) e a
    unicidade do nome vem da unique constraint da tabela.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _db_errors(self, op: str) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Integrity error on %s: %s", op, e.orig)
            raise UniquenessViolation(_collision_detail(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("DB error on %s", op)
            raise InternalError(op) from e

    def get_by_id(self, company_id: str) -> Company:
        with self._db_errors("get company"):
            row = self.db.get(CompanyRow, company_id)
        if row is None:
            raise NotFoundError("company not found")
        return _to_domain(row)

    def create(self, company: Company) -> Company:
        with self._db_errors("insert company"):
            self.db.add(CompanyRow(**asdict(company)))
            self.db.commit()
        return company

    def delete_by_id(self, company_id: str) -> None:
        with self._db_errors("delete company"):
            result = self.db.execute(delete(CompanyRow).where(CompanyRow.id == company_id))
            self.db.commit()
        if result.rowcount == 0:
            raise NotFoundError("company not found")

    def patch_by_id(self, company_id: str, patch: CompanyPatch) -> None:
        values = dict(patch.set_fields())
        if not values:
            raise InvalidInputError("empty patch")

        stmt = (
            update(CompanyRow)
            .where(CompanyRow.id == company_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self._db_errors("patch company"):
            result = self.db.execute(stmt)
            self.db.commit()
        if result.rowcount == 0:
            raise NotFoundError("company not found")


class InMemoryCompanyStore:
    """Store em memória (testes / lab). Todas as operações sob um único lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: Dict[str, Company] = {}

    def _name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        return any(c.name == name and c.id != exclude_id for c in self._rows.values())

    def get_by_id(self, company_id: str) -> Company:
        with self._lock:
            company = self._rows.get(company_id)
        if company is None:
            raise NotFoundError("company not found")
        return company

    def create(self, company: Company) -> Company:
        with self._lock:
            if company.id in self._rows:
                raise UniquenessViolation(COMPANY_EXISTS)
            if self._name_taken(company.name):
                raise UniquenessViolation(NAME_TAKEN)
            self._rows[company.id] = company
        return company

    def delete_by_id(self, company_id: str) -> None:
        with self._lock:
            if self._rows.pop(company_id, None) is None:
                raise NotFoundError("company not found")

    def patch_by_id(self, company_id: str, patch: CompanyPatch) -> None:
        values = dict(patch.set_fields())
        if not values:
            raise InvalidInputError("empty patch")

        with self._lock:
            current = self._rows.get(company_id)
            if current is None:
                raise NotFoundError("company not found")
            if "name" in values and self._name_taken(values["name"], exclude_id=company_id):
                raise UniquenessViolation(NAME_TAKEN)
            self._rows[company_id] = replace(current, **values)
