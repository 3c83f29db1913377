"""Company model — the tenant isolation boundary."""

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin


class Company(TimestampMixin, SQLModel, table=True):
    __tablename__ = "companies"

    # Externally supplied key, e.g. "company001"
    company_id: str = Field(max_length=100, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
