"""Pydantic data models for LeaderLens."""

from leaderlens.models.config import (
    CatalogConfig,
    GatewayConfig,
    LayoutConfig,
    NetworkConfig,
    TopicConfig,
)
from leaderlens.models.leader import (
    AnalysisVersion,
    ChapterMarker,
    Leader,
    NoiseSegment,
    QASegment,
)
from leaderlens.models.topics import KeyTopic, TopicAnalysis, TopicShare

__all__ = [
    "CatalogConfig",
    "GatewayConfig",
    "LayoutConfig",
    "NetworkConfig",
    "TopicConfig",
    "AnalysisVersion",
    "ChapterMarker",
    "Leader",
    "NoiseSegment",
    "QASegment",
    "KeyTopic",
    "TopicAnalysis",
    "TopicShare",
]
