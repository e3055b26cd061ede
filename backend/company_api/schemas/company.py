from typing import Optional

from pydantic import BaseModel, ConfigDict

from company_api.domain import Company, CompanyPatch


# Sem max_length aqui: tamanho/tipo são regras de negócio (CompanyService),
# o schema só garante o formato do JSON.
class CompanyCreate(BaseModel):
    name: str
    description: Optional[str] = None
    amount_of_employees: int
    registered: bool
    type: str

    def to_domain(self, company_id: str) -> Company:
        return Company(
            id=company_id,
            name=self.name,
            description=self.description,
            amount_of_employees=self.amount_of_employees,
            registered=self.registered,
            type=self.type,
        )


class CompanyPatchIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    amount_of_employees: Optional[int] = None
    registered: Optional[bool] = None
    type: Optional[str] = None

    def to_domain(self) -> CompanyPatch:
        return CompanyPatch(**self.model_dump())


class CompanyOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    amount_of_employees: int
    registered: bool
    type: str

    model_config = ConfigDict(from_attributes=True)


class StatusOut(BaseModel):
    status: str = "success"
