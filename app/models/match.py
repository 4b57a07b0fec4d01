"""Modelo Match (partida ou treino)"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import relationship
from app.models.base import BaseModel, as_utc

MATCH_TYPES = ("match", "training")
MATCH_STATUSES = ("scheduled", "ongoing", "completed", "cancelled")
TERMINAL_STATUSES = ("completed", "cancelled")
MATCH_RESULTS = ("win", "loss", "draw")


class Match(BaseModel):
    """Modelo de Partida/Treino com escalação, substituições e tempo de jogo"""
    __tablename__ = "matches"

    date = Column(DateTime(timezone=True), nullable=False, index=True)
    type = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="scheduled", index=True)

    # Escalação atual (ids de jogadores em campo, ordem preservada)
    team_sheet = Column(MutableList.as_mutable(JSON), nullable=False, default=list)
    # Minutos acumulados por jogador (chaves são ids em string)
    playtime = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)

    duration = Column(Integer, nullable=False, default=90)
    opponent = Column(String(100), nullable=True)
    venue = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)

    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    # diferença (min) do último playtime_alert periódico; None = sem alerta ativo
    last_alert_difference = Column(Integer, nullable=True)

    # Resultado (apenas partidas completas)
    result = Column(String(10), nullable=True)
    our_score = Column(Integer, nullable=True)
    opponent_score = Column(Integer, nullable=True)

    # Relationships
    substitutions = relationship(
        "Substitution",
        back_populates="match",
        order_by="Substitution.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    player_performances = relationship(
        "PlayerPerformance",
        back_populates="match",
        order_by="PlayerPerformance.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def kickoff_time(self):
        """Início do jogo contínuo: started_at ou, na falta, a criação do registro"""
        return as_utc(self.started_at or self.created_at)

    @property
    def match_result(self):
        if self.result is None:
            return None
        return {
            "result": self.result,
            "our_score": self.our_score or 0,
            "opponent_score": self.opponent_score or 0,
        }

    def get_performance(self, player_id: int):
        for performance in self.player_performances:
            if performance.player_id == player_id:
                return performance
        return None

    def calculate_team_goals(self) -> int:
        return sum(p.goals or 0 for p in self.player_performances)

    def __repr__(self):
        return f"<Match(id={self.id}, type='{self.type}', status='{self.status}', opponent='{self.opponent}')>"
