"""
CRUD operations for Customer model.

Implements the Repository pattern to encapsulate all database operations
for the customer directory.
"""

import uuid
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from delivery_hub.models.customer import Customer
from delivery_hub.schemas.customer import CustomerCreateRequest, CustomerUpdateRequest

# Columns the autocomplete endpoint may suggest values for
SUGGESTION_FIELDS = ("customer_name", "route", "truck", "dock_location")


def create(db: Session, customer_data: CustomerCreateRequest) -> Customer:
    """
    Create a new customer.

    Args:
        db: Database session
        customer_data: Validated customer data

    Returns:
        Created Customer instance
    """
    db_customer = Customer(**customer_data.model_dump())

    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)

    return db_customer


def get_by_id(db: Session, customer_id: uuid.UUID) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.id == customer_id).first()


def get_multi(
    db: Session,
    skip: int = 0,
    limit: int = 500,
    search: Optional[str] = None
) -> List[Customer]:
    """
    List customers ordered by name.

    Args:
        db: Database session
        skip: Number of records to skip (pagination)
        limit: Maximum number of records to return
        search: Case-insensitive substring matched against name, address,
            route, truck and dock location

    Returns:
        List of Customer instances
    """
    query = db.query(Customer)

    if search:
        term = search.strip()
        query = query.filter(or_(
            Customer.customer_name.icontains(term, autoescape=True),
            Customer.address.icontains(term, autoescape=True),
            Customer.route.icontains(term, autoescape=True),
            Customer.truck.icontains(term, autoescape=True),
            Customer.dock_location.icontains(term, autoescape=True),
        ))

    return query.order_by(Customer.customer_name).offset(skip).limit(limit).all()


def update(db: Session, customer: Customer, customer_data: CustomerUpdateRequest) -> Customer:
    """Apply the fields present in the request to an existing customer."""
    for field, value in customer_data.model_dump(exclude_unset=True).items():
        if field == "customer_name" and value is None:
            continue
        setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return customer


def delete(db: Session, customer: Customer) -> None:
    db.delete(customer)
    db.commit()


def get_suggestions(db: Session, field: str, prefix: str = "", limit: int = 10) -> List[str]:
    """
    Distinct non-empty values of a customer column, for autocomplete.

    Args:
        db: Database session
        field: One of SUGGESTION_FIELDS
        prefix: Case-insensitive prefix the values must start with
        limit: Maximum number of suggestions

    Raises:
        ValueError: If field is not a suggestible column
    """
    if field not in SUGGESTION_FIELDS:
        raise ValueError(f"Unsupported suggestion field: {field}")

    column = getattr(Customer, field)
    query = db.query(column).filter(column.isnot(None), column != "")
    if prefix:
        query = query.filter(column.istartswith(prefix.strip(), autoescape=True))

    rows = query.distinct().order_by(column).limit(limit).all()
    return [row[0] for row in rows]
