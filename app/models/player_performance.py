"""Modelo PlayerPerformance"""
from sqlalchemy import Column, Integer, Boolean, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base import BaseModel


class PlayerPerformance(BaseModel):
    """Desempenho individual de um jogador em uma partida"""
    __tablename__ = "player_performances"

    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(Integer, nullable=False, index=True)

    goals = Column(Integer, default=0, nullable=False)
    assists = Column(Integer, default=0, nullable=False)
    yellow_cards = Column(Integer, default=0, nullable=False)
    red_cards = Column(Integer, default=0, nullable=False)
    rating = Column(Float, nullable=True)
    player_of_match = Column(Boolean, default=False, nullable=False)
    minutes_played = Column(Integer, default=0, nullable=False)

    # Relationships
    match = relationship("Match", back_populates="player_performances")

    __table_args__ = (
        UniqueConstraint('match_id', 'player_id', name='uq_match_player_performance'),
    )

    def __repr__(self):
        return (
            f"<PlayerPerformance(match_id={self.match_id}, player_id={self.player_id}, "
            f"goals={self.goals})>"
        )
