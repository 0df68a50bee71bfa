"""
Customer directory endpoints.

Any signed-in account (driver or admin) can look customers up;
only admins can create, edit or delete them.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from delivery_hub.core.database import get_db
from delivery_hub.core.deps import get_admin_user, get_current_user
from delivery_hub.crud import customer as customer_crud
from delivery_hub.models.user import User
from delivery_hub.schemas.customer import (
    CustomerCreateRequest,
    CustomerResponse,
    CustomerUpdateRequest,
    SuggestionsResponse,
)

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[CustomerResponse])
def list_customers(
    search: Optional[str] = Query(None, description="Match name, address, route, truck or dock"),
    skip: int = Query(0, ge=0),
    limit: int = Query(500, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List customers ordered by name."""
    return customer_crud.get_multi(db, skip=skip, limit=limit, search=search)


@router.get("/suggestions", response_model=SuggestionsResponse)
def get_suggestions(
    field: str = Query(..., description="customer_name, route, truck or dock_location"),
    q: str = Query("", description="Prefix to match"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Autocomplete values already used for a customer field.

    Raises:
        HTTPException 400: Unsupported field
    """
    try:
        suggestions = customer_crud.get_suggestions(db, field, q)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SuggestionsResponse(field=field, suggestions=suggestions)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    customer = customer_crud.get_by_id(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    request: CustomerCreateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    customer = customer_crud.create(db, request)
    logger.info(f"Customer created: {customer.customer_name} ({customer.id})")
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: UUID,
    request: CustomerUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    customer = customer_crud.get_by_id(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    customer = customer_crud.update(db, customer, request)
    logger.info(f"Customer updated: {customer.id}")
    return customer


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: UUID,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_admin_user)
):
    customer = customer_crud.get_by_id(db, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    customer_crud.delete(db, customer)
    logger.info(f"Customer deleted: {customer_id}")
    return {"message": f"Customer {customer_id} deleted successfully"}
