"""Transaction DTOs for data validation."""
from typing import Optional
from pydantic import BaseModel, Field

from database.models.transaction import TransactionCategory, TransactionStatus, TransactionType


class CreateTransactionDTO(BaseModel):
    """DTO for recording a ledger row."""

    type: TransactionType = Field(..., description="income, expense or refund")
    category: TransactionCategory = Field(TransactionCategory.OTHER, description="What it was for")
    amount: int = Field(..., gt=0, description="Amount in currency units")
    description: Optional[str] = Field(None, max_length=1000)
    status: TransactionStatus = Field(TransactionStatus.PAID, description="paid or pending")
    payment_method: Optional[str] = Field(None, max_length=50)
    studio_id: Optional[int] = None
    client_id: Optional[int] = None
    reference_type: Optional[str] = Field(None, max_length=50)
    reference_id: Optional[int] = None


class ConfirmPaymentDTO(BaseModel):
    """DTO for confirming a pending payment."""

    payment_method: str = Field(..., min_length=1, max_length=50)
