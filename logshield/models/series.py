"""
Chart-ready series derived from the record history
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VectorPoint(BaseModel):
    """One slice of the attack-vector distribution"""
    name: str
    value: int


class TrafficPoint(BaseModel):
    """Hourly bucket: all records vs. records carrying an attack signature"""
    time: str
    traffic: int = 0
    threats: int = 0


class VolumePoint(BaseModel):
    time: str
    value: int = 0


class MetricStats(BaseModel):
    """Headline counters for the dashboard cards"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_requests: int = 0
    threats_blocked: int = 0
    critical_breaches: int = 0
    traffic_volume: List[VolumePoint] = Field(default_factory=list)
