"""Mini README: Request bodies accepted by the JSON API.

Integer fields are strict so ``"100"`` or ``true`` are rejected rather than
coerced; the application maps every request validation failure to 400.
Field names follow the camelCase wire format through aliases.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class EnvelopeRequest(BaseModel):
    """Payload for creating or updating an envelope."""

    name: StrictStr = Field(..., min_length=1)
    budget: StrictInt = Field(..., ge=0)


class ExpenseRequest(BaseModel):
    """Payload for recording a withdraw or deposit."""

    model_config = ConfigDict(populate_by_name=True)

    amount: StrictInt = Field(..., ge=0)
    memo: Optional[str] = ""
    transaction_type: StrictStr = Field(..., alias="transactionType")


class TransferRequest(BaseModel):
    """Payload for moving funds between two envelopes."""

    model_config = ConfigDict(populate_by_name=True)

    source_envelope_id: StrictInt = Field(..., alias="sourceEnvelopeId")
    target_envelope_id: StrictInt = Field(..., alias="targetEnvelopeId")
    amount: StrictInt = Field(..., ge=0)
    memo: Optional[str] = ""
