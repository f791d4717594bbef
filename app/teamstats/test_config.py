import copy
import json

import pytest

from teamstats.config import (
    DEFAULT_CONFIG,
    api_base,
    list_categories,
    list_members,
    load_config,
    validate_config,
)
from teamstats.errors import ConfigError
from teamstats.models.member import Member


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "TEAMSTATS_CONFIG",
        "TEAMSTATS_API_BASE",
        "TEAMSTATS_OUTPUT_PATH",
        "TEAMSTATS_REQUEST_DELAY_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_are_valid():
    cfg = validate_config(load_config())

    assert list_categories(cfg) == ["sports_car", "formula_car"]
    assert Member("Dalogax", 305408) in list_members(cfg)
    assert len(list_members(cfg)) == 6
    assert cfg["output_path"] == "data/team-data.json"
    assert cfg["request_delay_seconds"] == 2.0


def test_load_config_does_not_share_defaults():
    cfg = load_config()
    cfg["members"]["Extra"] = 1

    assert "Extra" not in DEFAULT_CONFIG["members"]


def test_file_overrides_defaults(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"members": {"Solo": 7}, "categories": ["oval"]}), encoding="utf-8")
    monkeypatch.setenv("TEAMSTATS_CONFIG", str(path))

    cfg = validate_config(load_config())

    assert list_members(cfg) == [Member("Solo", 7)]
    assert list_categories(cfg) == ["oval"]
    assert cfg["api_base"] == DEFAULT_CONFIG["api_base"]


def test_env_overrides_single_keys(monkeypatch):
    monkeypatch.setenv("TEAMSTATS_API_BASE", "https://api.example.test/career/")
    monkeypatch.setenv("TEAMSTATS_OUTPUT_PATH", "/tmp/out.json")
    monkeypatch.setenv("TEAMSTATS_REQUEST_DELAY_SECONDS", "0.5")

    cfg = load_config()

    assert api_base(cfg) == "https://api.example.test/career"
    assert cfg["output_path"] == "/tmp/out.json"
    assert cfg["request_delay_seconds"] == 0.5


def test_bad_env_value_is_config_error(monkeypatch):
    monkeypatch.setenv("TEAMSTATS_REQUEST_DELAY_SECONDS", "soon")

    with pytest.raises(ConfigError):
        load_config()


def test_missing_config_file_is_fatal(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "nope.json"))


def test_non_object_config_file_is_fatal(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize(
    "key, value",
    [
        ("members", {}),
        ("members", {"A": 0}),
        ("members", {"A": "12"}),
        ("members", {"A": True}),
        ("members", {"A": 1, "B": 1}),
        ("categories", []),
        ("categories", ["sports_car", "sports_car"]),
        ("categories", [""]),
        ("api_base", ""),
        ("output_path", ""),
        ("request_delay_seconds", -1),
        ("request_delay_seconds", float("nan")),
        ("request_delay_seconds", float("inf")),
        ("logging", "DEBUG"),
    ],
)
def test_validate_rejects(key, value):
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg[key] = value

    with pytest.raises(ConfigError):
        validate_config(cfg)


def test_nan_delay_from_env_is_rejected(monkeypatch):
    monkeypatch.setenv("TEAMSTATS_REQUEST_DELAY_SECONDS", "nan")

    with pytest.raises(ConfigError):
        validate_config(load_config())
