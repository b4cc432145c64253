"""
Tests for environment-backed configuration.
"""

import pytest

from querybench.config import Config, ConfigurationError, _env_bool, _env_int


def test_env_int(monkeypatch):
    monkeypatch.setenv("QB_TEST_INT", "42")
    assert _env_int("QB_TEST_INT", 1) == 42

    monkeypatch.delenv("QB_TEST_INT")
    assert _env_int("QB_TEST_INT", 7) == 7


def test_env_int_rejects_garbage(monkeypatch):
    monkeypatch.setenv("QB_TEST_INT", "lots")

    with pytest.raises(ConfigurationError, match="QB_TEST_INT"):
        _env_int("QB_TEST_INT", 1)


@pytest.mark.parametrize("raw, expected", [
    ("1", True), ("true", True), (" Yes ", True), ("on", True),
    ("0", False), ("false", False), ("", False),
])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("QB_TEST_BOOL", raw)
    assert _env_bool("QB_TEST_BOOL") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("QB_TEST_BOOL", raising=False)
    assert _env_bool("QB_TEST_BOOL", True) is True


@pytest.mark.parametrize("requested, expected", [
    (5000, 2000), (2000, 2000), (500, 500), (1, 1), (0, 1), (-3, 1),
])
def test_clamp_limit(requested, expected):
    assert Config.clamp_limit(requested) == expected


def test_fixture_config():
    fixture_config = Config.get_fixture_config()

    assert set(fixture_config) == {
        "categories", "brands", "products",
        "images_per_product", "reviews_per_product", "batch_size",
    }
    assert fixture_config["products"] == Config.PRODUCTS_COUNT


def test_ensure_directories(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "OUTPUT_DIR", tmp_path / "var")
    monkeypatch.setattr(Config, "REPORT_DIR", tmp_path / "reports")

    Config.ensure_directories()

    assert (tmp_path / "var").is_dir()
    assert (tmp_path / "reports").is_dir()
