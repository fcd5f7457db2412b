"""Metadata strategies for SEO plugins.

Each strategy maps the importer's neutral ``seo_*`` and social profile
columns onto the metadata keys a given SEO plugin reads. The strategy is
chosen by configuration (``seo.plugin``); rows carrying SEO columns while
no strategy is configured fail with ``UnsupportedCapabilityError``.
"""

from collections.abc import Mapping
from typing import Protocol
from urllib.parse import urlparse

from press_import.client.exceptions import ConfigurationError

SOCIAL_NETWORKS = ("facebook", "twitter", "instagram", "linkedin", "youtube")


class MetadataStrategy(Protocol):
    """Capability interface injected into importers."""

    name: str

    def map_seo(self, title: str, description: str, keyword: str | None = None) -> dict[str, str]: ...

    def map_social_profiles(self, profiles: Mapping[str, str]) -> dict[str, str]: ...


def _filled(values: Mapping[str, str | None]) -> dict[str, str]:
    return {key: value for key, value in values.items() if value}


class RankMathStrategy:
    """Rank Math keys; extra networks are folded into one space separated field."""

    name = "rank_math"

    def map_seo(self, title: str, description: str, keyword: str | None = None) -> dict[str, str]:
        return _filled(
            {
                "rank_math_title": title,
                "rank_math_description": description,
                "rank_math_focus_keyword": keyword,
            }
        )

    def map_social_profiles(self, profiles: Mapping[str, str]) -> dict[str, str]:
        if not profiles:
            return {}

        additional = " ".join(
            profiles[network]
            for network in ("instagram", "linkedin", "youtube")
            if profiles.get(network)
        )
        return _filled(
            {
                "facebook": profiles.get("facebook"),
                "twitter": profiles.get("twitter"),
                "additional_profile_urls": additional,
            }
        )


class YoastStrategy:
    """Yoast SEO keys."""

    name = "yoast"

    _SOCIAL_KEYS = {
        "facebook": "facebook",
        "twitter": "twitter",
        "instagram": "instagram_url",
        "linkedin": "linkedin",
        "youtube": "youtube_url",
    }

    def map_seo(self, title: str, description: str, keyword: str | None = None) -> dict[str, str]:
        return _filled(
            {
                "_yoast_wpseo_title": title,
                "_yoast_wpseo_metadesc": description,
                "_yoast_wpseo_focuskw": keyword,
            }
        )

    def map_social_profiles(self, profiles: Mapping[str, str]) -> dict[str, str]:
        mapped: dict[str, str] = {}
        for network, url in profiles.items():
            key = self._SOCIAL_KEYS.get(network)
            if key is None or not url:
                continue
            if network == "twitter":
                # Yoast stores the bare handle
                url = (urlparse(url).path or url).strip("/").replace("@", "")
            mapped[f"wpseo_{key}"] = url
        return mapped


STRATEGIES: dict[str, type] = {
    RankMathStrategy.name: RankMathStrategy,
    YoastStrategy.name: YoastStrategy,
}


def create_strategy(name: str | None) -> MetadataStrategy | None:
    """Instantiate the strategy registered under ``name``.

    Returns:
        Strategy instance, or None when ``name`` is empty

    Raises:
        ConfigurationError: If ``name`` is not a known strategy
    """
    if not name:
        return None

    strategy_class = STRATEGIES.get(name)
    if strategy_class is None:
        raise ConfigurationError(
            f"Unknown SEO plugin: {name}. Available: {', '.join(sorted(STRATEGIES))}"
        )
    return strategy_class()
