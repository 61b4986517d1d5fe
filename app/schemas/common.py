# app/schemas/common.py
from typing import Generic, List, TypeVar
from pydantic import BaseModel

DataType = TypeVar("DataType")

class SliceResponse(BaseModel, Generic[DataType]):
    """
    Страница без общего количества: элементы + флаг "есть еще".
    Размер items может быть меньше size даже при has_next=True (лента фильтрует после выборки).
    """
    items: List[DataType]
    current_page: int
    size: int
    has_next: bool

class StatusResponse(BaseModel):
    status: str = "ok"
    message: str
