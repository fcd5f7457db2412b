import pytest

from press_import.client.exceptions import ConfigurationError
from press_import.metadata.strategies import RankMathStrategy, YoastStrategy, create_strategy


def test_rank_math_seo_keys():
    assert RankMathStrategy().map_seo("Title", "Description", "keyword") == {
        "rank_math_title": "Title",
        "rank_math_description": "Description",
        "rank_math_focus_keyword": "keyword",
    }


def test_rank_math_folds_extra_profiles():
    metadata = RankMathStrategy().map_social_profiles(
        {
            "facebook": "https://facebook.com/acme",
            "instagram": "https://instagram.com/acme",
            "youtube": "https://youtube.com/acme",
        }
    )

    assert metadata == {
        "facebook": "https://facebook.com/acme",
        "additional_profile_urls": "https://instagram.com/acme https://youtube.com/acme",
    }


def test_yoast_seo_drops_blank_values():
    assert YoastStrategy().map_seo("Title", "") == {"_yoast_wpseo_title": "Title"}


def test_yoast_profiles():
    metadata = YoastStrategy().map_social_profiles(
        {"twitter": "@acme", "linkedin": "https://linkedin.com/company/acme"}
    )

    assert metadata == {
        "wpseo_twitter": "acme",
        "wpseo_linkedin": "https://linkedin.com/company/acme",
    }


def test_create_strategy():
    assert create_strategy(None) is None
    assert isinstance(create_strategy("rank_math"), RankMathStrategy)
    with pytest.raises(ConfigurationError):
        create_strategy("seopress")
