from pydantic import BaseModel
from typing import List

class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

class MessageResponse(BaseModel):
    message: str

class ReorderRequest(BaseModel):
    ids: List[int]
