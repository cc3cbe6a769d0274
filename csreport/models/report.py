"""Customer-visit report models."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Return timezone-aware current UTC timestamp."""
    return datetime.now(timezone.utc)


REQUIRED_FIELDS: tuple[str, ...] = (
    "company_name",
    "address",
    "contact_person",
    "mobile",
    "company_size",
    "office_size",
    "main_business",
    "products",
    "service_needs",
)


def _field(camel: str) -> Any:
    return Field(default=None, validation_alias=AliasChoices(_snake(camel), camel))


def _snake(camel: str) -> str:
    return "".join(f"_{char.lower()}" if char.isupper() else char for char in camel)


class ReportSubmission(BaseModel):
    """Raw report payload as sent by the form; accepts snake_case or camelCase keys."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    custom_lookup_code: str | None = Field(
        default=None,
        validation_alias=AliasChoices("custom_lookup_code", "customLookupCode", "customQueryCode"),
    )

    company_name: str | None = _field("companyName")
    address: str | None = None
    phone: str | None = None
    website: str | None = None

    contact_person: str | None = _field("contactPerson")
    mobile: str | None = None
    wechat: str | None = None

    company_size: str | None = _field("companySize")
    office_size: str | None = _field("officeSize")

    main_business: str | None = _field("mainBusiness")
    products: str | None = None
    service_needs: str | None = _field("serviceNeeds")
    chat_records: str | None = _field("chatRecords")

    report_date: date | None = _field("reportDate")

    @field_validator("report_date", mode="before")
    @classmethod
    def blank_date_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def first_missing_field(self) -> str | None:
        """Return the first required field that is absent or blank."""
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if not value or not value.strip():
                return name
        return None


class ReportRecord(BaseModel):
    """Durable report record keyed by its lookup code."""

    id: str
    lookup_code: str
    custom_lookup_code: str | None = None

    company_name: str
    address: str
    phone: str | None = None
    website: str | None = None

    contact_person: str
    mobile: str
    wechat: str | None = None

    company_size: str
    office_size: str

    main_business: str
    products: str
    service_needs: str
    chat_records: str | None = None

    report_date: date
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    collection_name: ClassVar[str] = "reports"

    def business_fields(self) -> dict[str, Any]:
        """Pass-through payload without identity, code, and timestamp fields."""
        return self.model_dump(
            exclude={"id", "lookup_code", "custom_lookup_code", "report_date", "created_at", "updated_at"}
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize for MongoDB, which has no plain date type."""
        payload = self.model_dump()
        payload["report_date"] = self.report_date.isoformat()
        return payload
