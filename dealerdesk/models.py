# dealerdesk/models.py
import datetime as dt
from typing import Literal, Optional
import uuid

from pydantic import BaseModel, Field, model_validator

ClaimStatus = Literal["Pending", "Approved", "Rejected"]
DealerStatus = Literal["Active", "Inactive"]
Sender = Literal["user", "assistant"]

# ----------------- Records -----------------
class Sku(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    category: str
    zone: str
    warehouse: str
    stock: int = Field(..., ge=0)
    price: float = Field(..., ge=0)
    description: str = ""

class Claim(BaseModel):
    id: str = Field(..., min_length=1)
    dealer_id: str
    dealer_name: str
    amount: float = Field(..., ge=0)
    status: ClaimStatus
    type: str
    submitted_date: dt.date
    resolved_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def _resolved_after_submitted(self):
        if self.resolved_date and self.resolved_date < self.submitted_date:
            raise ValueError("resolved_date must not precede submitted_date")
        return self

class Sale(BaseModel):
    id: str = Field(..., min_length=1)
    dealer_id: str
    dealer_name: str
    sku_id: str
    sku_name: str
    quantity: int = Field(..., gt=0)
    amount: float = Field(..., ge=0)
    date: dt.date
    region: str
    zone: str

class Dealer(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    region: str
    zone: str
    city: str
    contact: str = ""
    status: DealerStatus = "Active"

RECORD_MODELS = {"skus": Sku, "claims": Claim, "sales": Sale, "dealers": Dealer}

def as_row(model: BaseModel) -> dict:
    """Plain dict with ISO date strings, the shape the stores hand out."""
    return model.model_dump(mode="json")

# ----------------- Transcript -----------------
def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

class Message(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    sender: Sender
    content: str
    timestamp: dt.datetime = Field(default_factory=_now)
    reply_to: Optional[str] = None

# ----------------- API -----------------
class AskIn(BaseModel):
    question: str = Field(..., min_length=1)
    role: Optional[str] = "dealer"
    session_id: Optional[str] = None

class AskOut(BaseModel):
    answer: str
    intent: Optional[str] = None
    outcome: str
    used_remote: bool = False
    session_id: str
    message_id: str
    reply_to: str

class ApiKeyIn(BaseModel):
    api_key: str = Field(..., min_length=1)
