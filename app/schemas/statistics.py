"""Schemas de Statistics"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from app.models.statistics import INJURY_DESCRIPTION_MAX_LENGTH


class StatisticsResponse(BaseModel):
    id: int
    player_id: int
    match_id: int
    minutes_played: int
    positions_played: List[str]
    substitutions_count: int
    injuries: List[str]
    player_of_match: bool
    goals: int
    assists: int
    yellow_cards: int
    red_cards: int
    rating: Optional[float] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InjuryLogRequest(BaseModel):
    player_id: int
    match_id: int
    injury_description: str = Field(..., min_length=1, max_length=INJURY_DESCRIPTION_MAX_LENGTH)
    severity: Optional[str] = None


class MaterializationResponse(BaseModel):
    match_id: int
    records: int
    statistics: List[StatisticsResponse]
