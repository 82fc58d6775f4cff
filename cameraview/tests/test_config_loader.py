from pathlib import Path

import pytest

from cameraview.config.defaults import DEFAULTS
from cameraview.config.loader import load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    loaded = load_config(config_path)
    assert loaded == DEFAULTS
    assert loaded is not DEFAULTS  # caller can mutate safely


def test_load_config_merges_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
        [workers]
        max = 3

        [cameras]
        max_index = 1

        [cameras.facing]
        0 = "back"
        """,
        encoding="utf-8",
    )

    loaded = load_config(config_path)

    assert loaded["workers"]["max"] == 3
    assert loaded["cameras"]["max_index"] == 1
    assert loaded["cameras"]["facing"] == {"0": "back"}
    assert loaded["logging"] == DEFAULTS["logging"]


def test_load_config_raises_value_error_on_bad_toml(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("this is not valid toml", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(config_path)


def test_load_config_rejects_directory(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "body",
    [
        "[workers]\nmax = 0\n",
        "[workers]\nmax = \"two\"\n",
        "[workers]\nmax = true\n",
        "workers = 3\n",
        "[cameras]\nmax_index = -1\n",
        "[cameras]\nmax_index = 1.5\n",
        "[cameras.facing]\n0 = \"sideways\"\n",
        "[cameras.facing]\n0 = [\"back\"]\n",
        "[cameras.facing]\nleft = \"back\"\n",
        "[cameras]\nfacing = [\"back\"]\n",
        "[logging]\nlevel = 10\n",
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, body: str) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(body, encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid config file"):
        load_config(config_path)


def test_load_config_accepts_front_and_back_hints(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[cameras.facing]\n0 = "back"\n1 = "front"\n', encoding="utf-8")

    assert load_config(config_path)["cameras"]["facing"] == {"0": "back", "1": "front"}
