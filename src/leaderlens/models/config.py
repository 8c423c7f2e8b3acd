"""Configuration models for each part of the catalog."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GatewayConfig(BaseModel):
    """Configuration for the LLM annotation gateway."""

    llm_model: str = "claude-sonnet-4-6"
    qa_max_tokens: int = Field(default=3000, ge=256, le=16000)
    chapter_max_tokens: int = Field(default=2000, ge=256, le=16000)
    topic_max_tokens: int = Field(default=4000, ge=256, le=16000)
    categorize_max_tokens: int = Field(default=2048, ge=256, le=16000)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    categorize_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    max_attempts: int = Field(default=3, ge=1, le=10)
    qa_excerpt_chars: int = Field(default=100, ge=20, le=1000)


class NetworkConfig(BaseModel):
    """Filters applied when reducing theme tallies to a network."""

    min_co_occurrence: int = Field(default=2, ge=1, le=10)
    max_nodes: Literal[20, 30, 50, 100] = 50
    mode: Literal["official", "custom"] = "official"


class LayoutConfig(BaseModel):
    """Geometry for the network and pie-chart layouts."""

    network_width: float = Field(default=960.0, gt=0)
    network_height: float = Field(default=700.0, gt=0)
    link_distance: float = Field(default=100.0, gt=0)
    charge_strength: float = -200.0
    collide_padding: float = Field(default=5.0, ge=0)
    min_radius: float = Field(default=5.0, gt=0)
    max_radius: float = Field(default=20.0, gt=0)
    max_ticks: int = Field(default=300, ge=1, le=5000)
    seed: int = 0
    pie_width: float = Field(default=1100.0, gt=0)
    pie_height: float = Field(default=700.0, gt=0)
    pie_margin: float = Field(default=200.0, ge=0)
    label_padding: float = Field(default=8.0, ge=0)
    font_size: float = Field(default=13.0, gt=0)


class TopicConfig(BaseModel):
    """Configuration for corpus topic analysis and categorization."""

    cache_max_age_hours: float | None = Field(default=None, gt=0)
    summary_chars: int = Field(default=1000, ge=100, le=20000)
    excerpt_chars: int = Field(default=1500, ge=100, le=20000)
    max_topics_per_chapter: int = Field(default=3, ge=1, le=10)
    match_threshold: float = Field(default=0.5, gt=0.0, le=5.0)


class CatalogConfig(BaseModel):
    """Root document of ``catalog.yaml``."""

    version: str = "1.0"
    name: str = "Interview Catalog"
    store_dir: str = "store"
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    topics: TopicConfig = Field(default_factory=TopicConfig)
