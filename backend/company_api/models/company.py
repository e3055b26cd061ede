from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from company_api.db import Base


class CompanyRow(Base):
    __tablename__ = "companies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(15), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount_of_employees: Mapped[int] = mapped_column(Integer, nullable=False)
    registered: Mapped[bool] = mapped_column(Boolean, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
