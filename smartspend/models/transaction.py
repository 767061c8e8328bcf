import datetime as dt
import math
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CATEGORY = "Other"


class Transaction(BaseModel):
    """Canonical transaction produced by the normalizer.

    ``date`` holds a calendar date when the source value could be parsed, the
    original string when it could not, and ``None`` when the source had none.
    ``amount`` keeps the source's sign convention.
    """

    date: Optional[Union[dt.date, str]] = None
    name: str = ""
    amount: float = 0.0
    category: str = DEFAULT_CATEGORY

    @field_validator("amount")
    @classmethod
    def amount_must_be_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("amount must be a finite number")
        return value

    @field_validator("category")
    @classmethod
    def category_defaults_to_other(cls, value: str) -> str:
        return value.strip() or DEFAULT_CATEGORY

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class CategoryTotal(BaseModel):
    name: str
    total: float


class Insights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_this_month: float = Field(default=0.0, alias="totalThisMonth")
    top_categories: List[CategoryTotal] = Field(default_factory=list, alias="topCategories")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
