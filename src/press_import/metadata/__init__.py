"""SEO and social profile metadata strategies."""

from press_import.metadata.strategies import (
    SOCIAL_NETWORKS,
    MetadataStrategy,
    RankMathStrategy,
    YoastStrategy,
    create_strategy,
)

__all__ = [
    "MetadataStrategy",
    "RankMathStrategy",
    "YoastStrategy",
    "SOCIAL_NETWORKS",
    "create_strategy",
]
