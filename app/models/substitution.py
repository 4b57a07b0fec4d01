"""Modelo Substitution"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import BaseModel

DEFAULT_SUBSTITUTION_REASON = "Tactical substitution"


class Substitution(BaseModel):
    """Registro (somente inclusão) de uma substituição na partida"""
    __tablename__ = "substitutions"

    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    # Referências fracas a jogadores (sem FK, jogador pode ser removido)
    player_in = Column(Integer, nullable=False, index=True)
    player_out = Column(Integer, nullable=False, index=True)
    time = Column(DateTime(timezone=True), nullable=False)
    reason = Column(String(200), nullable=False, default=DEFAULT_SUBSTITUTION_REASON)

    match = relationship("Match", back_populates="substitutions")

    def __repr__(self):
        return (
            f"<Substitution(match_id={self.match_id}, in={self.player_in}, "
            f"out={self.player_out}, reason='{self.reason}')>"
        )
