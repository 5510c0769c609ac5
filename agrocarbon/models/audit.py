"""
Audit log model - append-only tamper-evident audit trail.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from agrocarbon.utils.time import utc_now


class AuditAction(str, Enum):
    FARMER_REGISTERED = "farmer_registered"
    CREDIT_CREATED = "credit_created"
    CREDIT_VERIFIED = "credit_verified"
    CREDIT_PENDING = "credit_pending"
    CREDIT_STATUS_CHANGED = "credit_status_changed"


class AuditLogBase(SQLModel):
    """Base audit log schema."""
    payload_hash: str = Field(..., description="SHA-256 hash of the audited payload")
    action: AuditAction = Field(..., description="What happened to the entity")
    entity_type: str = Field(..., description="Entity type, e.g. 'carbon_credit' or 'farmer'")
    entity_id: Optional[int] = Field(default=None, description="ID of the entity")
    extra_data: Optional[str] = Field(
        default=None,
        description="JSON string of additional metadata"
    )


class AuditLog(AuditLogBase, table=True):
    """Audit log database table - append-only."""
    
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class AuditLogRead(AuditLogBase):
    """Schema for reading an audit log entry."""
    id: int
    created_at: datetime
