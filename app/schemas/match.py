"""Schemas de Match, substituições e desempenho"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Literal, Optional
from datetime import datetime, timedelta, timezone

from app.models.base import as_utc
from app.schemas.player import PlayerSummary

MatchType = Literal["match", "training"]
MatchStatus = Literal["scheduled", "ongoing", "completed", "cancelled"]

MAX_DAYS_AHEAD = 365


def unique_player_ids(value: Optional[List[int]]) -> Optional[List[int]]:
    if value is None:
        return value
    duplicates = sorted({player_id for player_id in value if value.count(player_id) > 1})
    if duplicates:
        raise ValueError(f"Jogadores repetidos na escalação: {duplicates}")
    return value


class MatchCreate(BaseModel):
    """Agendamento de partida/treino (também usado para iniciar direto)"""
    date: datetime
    type: MatchType
    team_sheet: List[int] = Field(default_factory=list)
    duration: int = Field(90, ge=1, le=200)
    opponent: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("type", mode="before")
    @classmethod
    def lowercase_type(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("date")
    @classmethod
    def not_too_far_ahead(cls, value: datetime) -> datetime:
        value = as_utc(value)
        if value > datetime.now(timezone.utc) + timedelta(days=MAX_DAYS_AHEAD):
            raise ValueError("Data da partida não pode ser mais de 1 ano no futuro")
        return value

    @field_validator("team_sheet")
    @classmethod
    def check_team_sheet(cls, value):
        return unique_player_ids(value)

    @field_validator("opponent", "venue")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class MatchUpdate(BaseModel):
    """Atualização de agenda (status só muda pelas operações de ciclo de vida)"""
    date: Optional[datetime] = None
    type: Optional[MatchType] = None
    team_sheet: Optional[List[int]] = None
    duration: Optional[int] = Field(None, ge=1, le=200)
    opponent: Optional[str] = Field(None, max_length=100)
    venue: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("date", "type", "duration")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} não pode ser nulo")
        return value

    @field_validator("date")
    @classmethod
    def not_too_far_ahead(cls, value):
        if value is None:
            return value
        return MatchCreate.not_too_far_ahead(value)

    @field_validator("team_sheet")
    @classmethod
    def check_team_sheet(cls, value):
        return unique_player_ids(value)


class StartMatchRequest(BaseModel):
    team_sheet: Optional[List[int]] = None

    @field_validator("team_sheet")
    @classmethod
    def check_team_sheet(cls, value):
        return unique_player_ids(value)


class SubstitutionRequest(BaseModel):
    player_in: int
    player_out: int
    time: Optional[datetime] = None
    reason: Optional[str] = Field(None, max_length=200)
    # Validado no service: valor inválido não impede a substituição
    injury_status: Optional[str] = None
    injury_notes: Optional[str] = Field(None, max_length=1000)


class SubstitutionResponse(BaseModel):
    id: int
    player_in: int
    player_out: int
    time: datetime
    reason: str

    model_config = ConfigDict(from_attributes=True)


class PerformanceIn(BaseModel):
    player_id: int
    goals: int = Field(0, ge=0)
    assists: int = Field(0, ge=0)
    yellow_cards: int = Field(0, ge=0)
    red_cards: int = Field(0, ge=0)
    rating: Optional[float] = Field(None, ge=1, le=10)
    player_of_match: bool = False


class PerformanceResponse(BaseModel):
    player_id: int
    goals: int
    assists: int
    yellow_cards: int
    red_cards: int
    rating: Optional[float] = None
    player_of_match: bool
    minutes_played: int

    model_config = ConfigDict(from_attributes=True)


class MatchResultIn(BaseModel):
    # Obrigatoriedade e valores validados no service (depende do tipo da partida)
    result: Optional[str] = None
    our_score: Optional[int] = Field(None, ge=0)
    opponent_score: Optional[int] = Field(None, ge=0)


class MatchResultResponse(BaseModel):
    result: str
    our_score: int
    opponent_score: int


class EndMatchRequest(BaseModel):
    match_result: Optional[MatchResultIn] = None
    player_performances: List[PerformanceIn] = Field(default_factory=list)


class MatchResponse(BaseModel):
    id: int
    date: datetime
    type: str
    status: str
    team_sheet: List[int]
    substitutions: List[SubstitutionResponse]
    playtime: Dict[str, int]
    duration: int
    opponent: Optional[str] = None
    venue: Optional[str] = None
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    match_result: Optional[MatchResultResponse] = None
    player_performances: List[PerformanceResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MatchListResponse(BaseModel):
    count: int
    total: int
    pagination: dict
    data: List[MatchResponse]


class GenerateTeamRequest(BaseModel):
    formation_preference: Optional[str] = None
    prioritize_rest: bool = False


class GeneratedTeamResponse(BaseModel):
    match: MatchResponse
    generated_team: List[PlayerSummary]
    formation: str
    rotation_info: dict
