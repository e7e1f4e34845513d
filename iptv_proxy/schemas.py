from typing import Literal

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Service update status"""
    status: str = Field("running", description="Service state")
    last_update: str | None = Field(None, description="ISO8601 time of the last successful update")
    next_update: str | None = Field(None, description="last_update plus the update interval")
    next_scheduled_update: str | None = Field(None, description="Next run time of the update job")
    updating: bool = Field(False, description="Whether an update is in flight")
    channels_count: int = Field(0, description="Channels in the published snapshot")
    update_interval_minutes: int
    epg_hours: int


class RefreshResponse(BaseModel):
    """Manual refresh result"""
    status: Literal["success", "failed", "busy"]
    message: str
    last_update: str | None = Field(None, description="ISO8601 time of the new snapshot")
    channels_count: int | None = None
