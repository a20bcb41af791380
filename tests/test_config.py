import pytest

import config


def test_horizon_setting_reads_environment(monkeypatch):
    monkeypatch.setenv("PROJECTION_HORIZON_DAYS", "14")
    assert config.non_negative_int("PROJECTION_HORIZON_DAYS", "30") == 14


def test_horizon_setting_defaults_when_unset(monkeypatch):
    monkeypatch.delenv("PROJECTION_HORIZON_DAYS", raising=False)
    assert config.non_negative_int("PROJECTION_HORIZON_DAYS", "30") == 30


def test_negative_horizon_setting_is_rejected(monkeypatch):
    monkeypatch.setenv("PROJECTION_HORIZON_DAYS", "-1")
    with pytest.raises(ValueError, match="PROJECTION_HORIZON_DAYS"):
        config.non_negative_int("PROJECTION_HORIZON_DAYS", "30")
