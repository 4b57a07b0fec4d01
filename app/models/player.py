"""Modelo Player"""
from sqlalchemy import Column, Integer, String, Boolean, Date, Text, JSON
from sqlalchemy.ext.mutable import MutableList
from app.models.base import BaseModel

POSITIONS = ("Goalkeeper", "Defender", "Midfielder", "Forward")
INJURY_STATUSES = ("Healthy", "Minor Injury", "Major Injury", "Recovering")
# Status que ainda permitem escalar o jogador
SELECTABLE_INJURY_STATUSES = ("Healthy", "Minor Injury")


class Player(BaseModel):
    """Modelo de Jogador do elenco"""
    __tablename__ = "players"

    name = Column(String(100), nullable=False)
    jersey_number = Column(Integer, nullable=False, unique=True, index=True)
    position = Column(String(20), nullable=False, index=True)
    preferred_positions = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    injury_status = Column(String(20), nullable=False, default="Healthy")
    injury_notes = Column(Text, nullable=True)
    availability = Column(Boolean, nullable=False, default=True, index=True)
    date_of_birth = Column(Date, nullable=True)

    @property
    def is_selectable(self) -> bool:
        return bool(self.availability) and self.injury_status in SELECTABLE_INJURY_STATUSES

    def plays(self, position: str) -> bool:
        """Posição principal ou preferida"""
        return self.position == position or position in (self.preferred_positions or [])

    def __repr__(self):
        return f"<Player(name='{self.name}', jersey={self.jersey_number}, position='{self.position}')>"
