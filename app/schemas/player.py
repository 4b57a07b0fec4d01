"""Schemas de Player"""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Literal, Optional
from datetime import date, datetime

Position = Literal["Goalkeeper", "Defender", "Midfielder", "Forward"]
InjuryStatus = Literal["Healthy", "Minor Injury", "Major Injury", "Recovering"]

MAX_JUNIOR_AGE = 20


def age_on(birth_date: date, today: date) -> int:
    """Idade completa em anos na data informada"""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def validate_junior_birth_date(value: Optional[date]) -> Optional[date]:
    if value is None:
        return value
    today = date.today()
    if value > today:
        raise ValueError("Data de nascimento não pode estar no futuro")
    if age_on(value, today) > MAX_JUNIOR_AGE:
        raise ValueError(f"Jogador deve ter no máximo {MAX_JUNIOR_AGE} anos (categoria de base)")
    return value


class PlayerCreate(BaseModel):
    """Schema para criação de Player"""
    name: str = Field(..., min_length=1, max_length=100)
    jersey_number: int = Field(..., ge=1, le=99)
    position: Position
    preferred_positions: List[Position] = Field(default_factory=list)
    injury_status: InjuryStatus = "Healthy"
    availability: bool = True
    date_of_birth: Optional[date] = None

    @field_validator("date_of_birth")
    @classmethod
    def check_birth_date(cls, value):
        return validate_junior_birth_date(value)

    @model_validator(mode="after")
    def default_preferred_positions(self):
        if not self.preferred_positions:
            self.preferred_positions = [self.position]
        return self


class PlayerUpdate(BaseModel):
    """Schema para atualização de Player"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    jersey_number: Optional[int] = Field(None, ge=1, le=99)
    position: Optional[Position] = None
    preferred_positions: Optional[List[Position]] = None
    injury_status: Optional[InjuryStatus] = None
    injury_notes: Optional[str] = Field(None, max_length=1000)
    availability: Optional[bool] = None
    date_of_birth: Optional[date] = None

    @field_validator("name", "jersey_number", "position", "injury_status", "availability")
    @classmethod
    def not_null(cls, value, info):
        # omitir o campo mantém o valor atual; null explícito não é aceito
        if value is None:
            raise ValueError(f"{info.field_name} não pode ser nulo")
        return value

    @field_validator("date_of_birth")
    @classmethod
    def check_birth_date(cls, value):
        return validate_junior_birth_date(value)


class InjuryStatusUpdate(BaseModel):
    injury_status: InjuryStatus
    injury_notes: Optional[str] = Field(None, max_length=1000)


class PlayerSummary(BaseModel):
    id: int
    name: str
    jersey_number: int
    position: str

    model_config = ConfigDict(from_attributes=True)


class PlayerResponse(PlayerSummary):
    """Schema de resposta de Player"""
    preferred_positions: List[str]
    injury_status: str
    injury_notes: Optional[str] = None
    availability: bool
    date_of_birth: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class PageLink(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: Optional[PageLink] = None
    prev: Optional[PageLink] = None


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    start_index = (page - 1) * limit
    pagination = Pagination()
    if start_index + limit < total:
        pagination.next = PageLink(page=page + 1, limit=limit)
    if start_index > 0:
        pagination.prev = PageLink(page=page - 1, limit=limit)
    return pagination


class PlayerListResponse(BaseModel):
    count: int
    total: int
    pagination: Pagination
    data: List[PlayerResponse]
