from __future__ import annotations

import logging
from typing import Optional

from company_api.core.errors import ValidationError
from company_api.domain import Company, CompanyPatch, CompanyType
from company_api.events.publisher import (
    COMPANY_CREATED,
    COMPANY_DELETED,
    COMPANY_PATCHED,
    CompanyEvent,
    CompanyEventPublisher,
    EventCompany,
)
from company_api.stores.company import CompanyStore

logger = logging.getLogger(__name__)

MAX_NAME_LEN = 15
MAX_DESCRIPTION_LEN = 3000


def _validate_name(name: str) -> None:
    if not name.strip():
        raise ValidationError("name is required")
    if len(name) > MAX_NAME_LEN:
        raise ValidationError(f"name exceeds the limit of {MAX_NAME_LEN} characters")


def _validate_description(description: Optional[str]) -> None:
    if description is None:
        return
    desc = description.strip()
    if desc and len(desc) > MAX_DESCRIPTION_LEN:
        raise ValidationError(f"description exceeds the limit of {MAX_DESCRIPTION_LEN} characters")


def _validate_type(value: str) -> None:
    if not CompanyType.is_valid(value):
        raise ValidationError("type value is invalid")


def validate_company(company: Company) -> None:
    _validate_name(company.name)
    _validate_description(company.description)
    _validate_type(company.type)


def validate_patch(patch: CompanyPatch) -> None:
    if not patch.set_fields():
        raise ValidationError("no fields provided for update")
    if patch.name is not None:
        _validate_name(patch.name)
    _validate_description(patch.description)
    if patch.type is not None:
        _validate_type(patch.type)


class CompanyService:
    """
    Casos de uso de empresa: valida, persiste e depois notifica.

    A notificação é best-effort: falha no publish só vai para o log, nunca
    derruba nem desfaz a operação.
    """

    def __init__(self, store: CompanyStore, publisher: Optional[CompanyEventPublisher] = None):
        self.store = store
        self.publisher = publisher

    def get_company(self, company_id: str) -> Company:
        return self.store.get_by_id(company_id)

    def create_company(self, company: Company) -> Company:
        validate_company(company)
        created = self.store.create(company)
        self._publish(CompanyEvent(COMPANY_CREATED, EventCompany.snapshot(created)))
        return created

    def patch_company(self, company_id: str, patch: CompanyPatch) -> None:
        validate_patch(patch)
        self.store.patch_by_id(company_id, patch)
        self._publish(CompanyEvent(COMPANY_PATCHED, EventCompany(id=company_id)))

    def delete_company(self, company_id: str) -> None:
        self.store.delete_by_id(company_id)
        self._publish(CompanyEvent(COMPANY_DELETED, EventCompany(id=company_id)))

    def _publish(self, event: CompanyEvent) -> None:
        if self.publisher is None:
            return
        try:
            self.publisher.publish(event)
        except Exception:
            logger.exception(
                "publish company event failed operation=%s company_id=%s",
                event.operation,
                event.company.id,
            )
