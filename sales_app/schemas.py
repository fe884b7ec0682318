from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    title: str
    price: float
    description: Optional[str] = None
    dateOfSale: datetime = Field(validation_alias=AliasChoices("date_of_sale", "dateOfSale"))
    category: str
    sold: bool
    image: Optional[str] = None

    @field_validator("dateOfSale")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime: # stored naive, always UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

class TransactionPage(BaseModel):
    transactions: List[TransactionOut]
    total: int

class Statistics(BaseModel):
    totalSaleAmount: float = 0
    totalSoldItems: int = 0
    totalNotSoldItems: int = 0

class PriceRangeCount(BaseModel):
    range: str
    count: int

class CategoryCount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(alias="_id")
    items: int

class CombinedData(BaseModel):
    statistics: Statistics
    barChartData: List[PriceRangeCount]
    pieChartData: List[CategoryCount]

class InitializeResult(BaseModel):
    message: str
    count: int
