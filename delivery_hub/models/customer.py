from sqlalchemy import Column, String, DateTime, Text, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from delivery_hub.core.database import Base


class Customer(Base):
    """
    Delivery customer record looked up by drivers on their route.
    """
    __tablename__ = "customers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    customer_name = Column(String, nullable=False, index=True)
    address = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    truck = Column(String, nullable=True)
    dock_location = Column(String, nullable=True)
    route = Column(String, nullable=True, index=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Customer(id={self.id}, customer_name='{self.customer_name}', route='{self.route}')>"
