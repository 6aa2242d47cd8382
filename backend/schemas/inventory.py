from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


TransactionType = Literal["in", "out"]

# Placeholder values a form may send for "nothing selected".
_UNSET_MARKERS = {"", "none", "null", "-"}


def _optional_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = str(v).strip()
    if v.lower() in _UNSET_MARKERS:
        return None
    return v


def _required_text(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("field is required")
    return v


def naive_local(v: Optional[datetime]) -> Optional[datetime]:
    """Stored dates are naive local time; convert offset-aware values into it."""
    if v is None or v.tzinfo is None:
        return v
    return v.astimezone().replace(tzinfo=None)


class ItemCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: str
    name_ar: str
    category: str
    quantity: float = 0
    min_quantity: float = 0
    unit: Optional[str] = None
    capacity: Optional[str] = None

    @field_validator("name", "name_ar", "category")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("quantity", "min_quantity")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("unit", "capacity", mode="before")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class ItemUpdate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    name: Optional[str] = None
    name_ar: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[float] = None
    min_quantity: Optional[float] = None
    unit: Optional[str] = None
    capacity: Optional[str] = None

    @field_validator("name", "name_ar", "category")
    @classmethod
    def _strip_optional(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = (v or "").strip()
        if not v:
            raise ValueError("cannot be empty")
        return v

    @field_validator("quantity", "min_quantity")
    @classmethod
    def _non_negative_optional(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("unit", "capacity", mode="before")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class DispenseLine(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    item_id: str
    quantity: float
    unit: Optional[str] = None
    capacity: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("item_id")
    @classmethod
    def _item_required(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @field_validator("unit", "capacity", "notes", mode="before")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class StockRequest(BaseModel):
    """Body of a dispense (out) or receive (in) request."""
    lines: List[DispenseLine]
    department: str
    date: Optional[datetime] = None
    notes: Optional[str] = None
    created_by_user_id: Optional[str] = None

    @field_validator("lines")
    @classmethod
    def _at_least_one(cls, v: List[DispenseLine]) -> List[DispenseLine]:
        if not v:
            raise ValueError("at least one line is required")
        return v

    @field_validator("department")
    @classmethod
    def _department_required(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("date")
    @classmethod
    def _date_naive_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_local(v)

    @field_validator("notes", "created_by_user_id", mode="before")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class ItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    name_ar: str
    category: str
    quantity: float
    min_quantity: float
    unit: Optional[str] = None
    capacity: Optional[str] = None
    last_updated: datetime
    is_low_stock: bool


class TransactionLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    quantity: float
    unit: Optional[str] = None
    capacity: Optional[str] = None
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: datetime
    department: str
    type: TransactionType
    notes: Optional[str] = None
    created_by_user_id: Optional[str] = None
    lines: List[TransactionLineOut]


class TransactionCreated(BaseModel):
    id: str
    type: TransactionType
