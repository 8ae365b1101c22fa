"""
Pydantic schemas for appointment endpoints.
"""
import datetime as dt
from typing import Literal
from pydantic import BaseModel

class AppointmentCreateIn(BaseModel):
    counselorId: str
    date: dt.datetime  # Naive values are taken as UTC
    reason: str
    type: Literal["online", "offline"] = "online"
    notes: str | None = None

class AppointmentStatusIn(BaseModel):
    status: Literal["approved", "rejected"]
    notes: str | None = None
