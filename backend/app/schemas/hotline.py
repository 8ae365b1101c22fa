"""
Pydantic schemas for hotline endpoints.
"""
from pydantic import BaseModel

class HotlineStartIn(BaseModel):
    counselorId: str
    emergencyDetails: str

class HotlineEndIn(BaseModel):
    notes: str | None = None
