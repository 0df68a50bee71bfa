"""
Pydantic schemas for the customer directory.
"""

from pydantic import BaseModel, ConfigDict, Field, UUID4
from typing import List, Optional
from datetime import datetime


class CustomerCreateRequest(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = None
    phone_number: Optional[str] = None
    truck: Optional[str] = None
    dock_location: Optional[str] = None
    route: Optional[str] = None
    notes: Optional[str] = None


class CustomerUpdateRequest(BaseModel):
    """Only the fields present in the request body are updated."""
    customer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = None
    phone_number: Optional[str] = None
    truck: Optional[str] = None
    dock_location: Optional[str] = None
    route: Optional[str] = None
    notes: Optional[str] = None


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID4
    customer_name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None
    truck: Optional[str] = None
    dock_location: Optional[str] = None
    route: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SuggestionsResponse(BaseModel):
    field: str
    suggestions: List[str]
