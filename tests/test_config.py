"""Test configuration loading."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults():
    """Contest constants have their documented defaults."""
    settings = make_settings()
    assert settings.milestones == [10, 50, 100, 200]
    assert settings.jackpot_threshold == 100
    assert settings.early_bird_limit == 100
    assert settings.early_bird_bonus == 50


def test_provisional_and_final_weights():
    settings = make_settings()

    provisional = settings.provisional_weights
    assert (provisional.waitlist_clients, provisional.waitlist_influencers, provisional.waitlist_pros) == (2, 15, 25)
    assert (provisional.app_downloads, provisional.validated_influencers, provisional.validated_pros) == (10, 50, 100)

    final = settings.final_weights
    assert (final.waitlist_clients, final.waitlist_influencers, final.waitlist_pros) == (0, 0, 0)
    assert final.validated_pros == 100


def test_milestones_from_env_string(monkeypatch):
    monkeypatch.setenv("MILESTONES", "5,20,80")
    assert Settings(_env_file=None).milestones == [5, 20, 80]


@pytest.mark.parametrize("milestones", [[], [50, 10], [10, 10]])
def test_milestones_must_ascend(milestones):
    with pytest.raises(ValidationError):
        make_settings(milestones=milestones)


def test_cors_origins_comma_separated(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://afroe.be, https://www.afroe.be")
    assert Settings(_env_file=None).cors_origins == ["https://afroe.be", "https://www.afroe.be"]


def test_launch_cutover():
    settings = make_settings(launch_at=datetime(2026, 1, 15))
    assert settings.launch_at.tzinfo is not None
    assert not settings.is_post_launch(datetime(2026, 1, 14, 23, 59, tzinfo=timezone.utc))
    assert settings.is_post_launch(datetime(2026, 1, 15, tzinfo=timezone.utc))
    assert settings.is_post_launch(datetime(2026, 2, 1))
