"""Waiting list DTOs for data validation."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field


class CreateWaitingListEntryDTO(BaseModel):
    """DTO for adding a client to the waiting list."""

    client_id: int = Field(..., description="Client ID")
    studio_id: int = Field(..., description="Studio ID")
    coach_id: Optional[int] = Field(None, description="Preferred coach")
    preferred_date: Optional[date] = Field(None, description="Preferred day")
    preferred_time_slot: Optional[str] = Field(None, max_length=50, description="e.g. 'morning' or '18:00-20:00'")
    requires_approval: bool = Field(False, description="Entry starts pending when set")
    notes: Optional[str] = Field(None, max_length=1000)


class UpdateWaitingListEntryDTO(BaseModel):
    """DTO for editing entry preferences; status is changed by workflow actions only."""

    coach_id: Optional[int] = None
    preferred_date: Optional[date] = None
    preferred_time_slot: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=1000)


class UpdatePriorityDTO(BaseModel):
    """DTO for re-ranking an entry."""

    priority: int = Field(..., description="Lower number is served first")


class MarkBookedDTO(BaseModel):
    """DTO for marking an entry booked after the session exists."""

    session_id: Optional[int] = Field(None, description="Session created for the entry")


class BookSessionDTO(BaseModel):
    """DTO for booking a session from a waiting list entry."""

    coach_id: int = Field(..., description="Coach ID")
    room_id: Optional[int] = Field(None, description="Room ID")
    start_time: datetime = Field(..., description="Session start")
    duration_minutes: int = Field(20, gt=0, le=240, description="Session length")
    use_package: bool = Field(True, description="Take a session from the client's package")
    notes: Optional[str] = Field(None, max_length=500)
