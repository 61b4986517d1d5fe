# app/schemas/funding.py
from datetime import date, datetime
from pydantic import BaseModel, Field

from app.models.funding import FundingStatus
from app.schemas.common import SliceResponse


# Схема для данных, которые мы получаем от фронтенда
class FundingCreate(BaseModel):
    product_id: int
    product_option_id: int
    anniversary_category_id: int
    title: str = Field(min_length=1, max_length=100)
    content: str | None = None
    start_date: date
    anniversary_date: date
    end_date: date
    is_private: bool = False


class FundingResponse(BaseModel):
    id: int
    consumer_id: int
    product_id: int
    product_option_id: int
    title: str
    target_price: int
    start_date: date
    anniversary_date: date
    end_date: date
    is_private: bool
    status: FundingStatus

    class Config:
        from_attributes = True


class FundingDetail(FundingResponse):
    anniversary_category_id: int
    content: str | None = None
    created_at: datetime


class FundingCalendarItem(BaseModel):
    id: int
    consumer_id: int
    title: str
    anniversary_date: date
    status: FundingStatus

    class Config:
        from_attributes = True


class FundingSlice(SliceResponse[FundingResponse]):
    pass
