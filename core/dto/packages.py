"""Package and client package DTOs for data validation."""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CreatePackageDTO(BaseModel):
    """DTO for creating a sellable package."""

    name: str = Field(..., min_length=1, max_length=255, description="Package name")
    description: Optional[str] = Field(None, max_length=2000, description="Optional description")
    total_sessions: int = Field(..., gt=0, description="Sessions included")
    price: int = Field(..., ge=0, description="Price in currency units")
    validity_days: int = Field(..., gt=0, description="Days the package stays valid")


class UpdatePackageDTO(BaseModel):
    """DTO for updating a package; only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    total_sessions: Optional[int] = Field(None, gt=0)
    price: Optional[int] = Field(None, ge=0)
    validity_days: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None


class AssignPackageDTO(BaseModel):
    """DTO for selling a package to a client."""

    client_id: int = Field(..., description="Client ID")
    package_id: int = Field(..., description="Package ID")
    payment_method: Optional[str] = Field(
        None,
        max_length=50,
        description="How the client paid; empty means payment is pending"
    )
    payment_notes: Optional[str] = Field(None, max_length=500)
    purchase_date: Optional[date] = Field(None, description="Defaults to today")


class RenewPackageDTO(BaseModel):
    """DTO for renewing a client package."""

    new_package_id: Optional[int] = Field(None, description="Switch to another package")
    payment_method: Optional[str] = Field(None, max_length=50)
    payment_notes: Optional[str] = Field(None, max_length=500)


class AdjustSessionsDTO(BaseModel):
    """DTO for a manual correction of remaining sessions."""

    adjustment: int = Field(..., description="Sessions to add (positive) or remove (negative)")
    reason: str = Field(..., min_length=1, max_length=500, description="Why the correction was made")

    @field_validator('adjustment')
    @classmethod
    def validate_adjustment(cls, v: int) -> int:
        """Reject no-op corrections."""
        if v == 0:
            raise ValueError("adjustment must not be zero")
        return v
