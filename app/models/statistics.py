"""Modelo Statistics"""
from sqlalchemy import Column, Integer, Boolean, Float, ForeignKey, UniqueConstraint, JSON
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

INJURY_DESCRIPTION_MAX_LENGTH = 200


class Statistics(BaseModel):
    """Estatísticas materializadas de um jogador em uma partida"""
    __tablename__ = "statistics"

    player_id = Column(Integer, nullable=False, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)

    minutes_played = Column(Integer, default=0, nullable=False)
    positions_played = Column(MutableList.as_mutable(JSON), default=list, nullable=False)
    substitutions_count = Column(Integer, default=0, nullable=False)
    injuries = Column(MutableList.as_mutable(JSON), default=list, nullable=False)
    player_of_match = Column(Boolean, default=False, nullable=False, index=True)

    goals = Column(Integer, default=0, nullable=False)
    assists = Column(Integer, default=0, nullable=False)
    yellow_cards = Column(Integer, default=0, nullable=False)
    red_cards = Column(Integer, default=0, nullable=False)
    rating = Column(Float, nullable=True)

    # Relationships
    match = relationship("Match", lazy="joined")

    __table_args__ = (
        UniqueConstraint('player_id', 'match_id', name='uq_statistics_player_match'),
    )

    @classmethod
    def zeroed(cls, player_id: int, **match_ref) -> "Statistics":
        """Registro vazio; match_ref é match=... ou match_id=..."""
        return cls(
            player_id=player_id,
            minutes_played=0,
            positions_played=[],
            substitutions_count=0,
            injuries=[],
            player_of_match=False,
            goals=0,
            assists=0,
            yellow_cards=0,
            red_cards=0,
            **match_ref,
        )

    def __repr__(self):
        return (
            f"<Statistics(player_id={self.player_id}, match_id={self.match_id}, "
            f"minutes={self.minutes_played}, goals={self.goals})>"
        )
