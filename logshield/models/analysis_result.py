"""
Risk analysis result for one ingested batch
"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RiskTier(str, Enum):
    SAFE = "Safe"
    CAUTION = "Caution"
    CRITICAL = "Critical"


class AnalysisStats(BaseModel):
    breaches: int = 0
    attempts: int = 0


class AnalysisResult(BaseModel):
    """Score is 0..100, lower means more damage found in the batch."""
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    risk: RiskTier
    recommendation: str
    stats: AnalysisStats = Field(default_factory=AnalysisStats)
