"""Health snapshot schema."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class DatabaseStatus(StrEnum):
    """Connectivity state of the database as seen by the connectivity check."""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class HealthResponse(BaseModel):
    """Point-in-time process and database status."""

    status: str = Field(default="OK", description="Always OK when the process answers")
    timestamp: datetime = Field(description="Time the snapshot was taken (UTC)")
    uptime: float = Field(ge=0, description="Process uptime in seconds")
    environment: str = Field(description="Deployment environment label")
    database: DatabaseStatus = Field(description="Database connectivity")
