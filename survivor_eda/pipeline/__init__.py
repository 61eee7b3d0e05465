"""End-to-end feature materialization."""

from .materialization import (
    FeatureTables,
    MaterializationConfig,
    SurvivorFeatureMaterializer,
    build_feature_tables,
)

__all__ = [
    "FeatureTables",
    "MaterializationConfig",
    "SurvivorFeatureMaterializer",
    "build_feature_tables",
]
