# app/schemas/friend.py
from pydantic import BaseModel

class FriendInfo(BaseModel):
    consumer_id: int
    name: str
    is_favorite: bool

class FavoriteToggleResponse(BaseModel):
    to_consumer_id: int
    is_favorite: bool
