from __future__ import annotations

from pathlib import Path

import pytest

from quote_keeper.config.loader import ConfigLocator, ConfigRepository
from quote_keeper.errors import ConfigError


def test_config_locator_uses_env_and_creates_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUOTE_KEEPER_HOME", str(tmp_path))
    locator = ConfigLocator()

    assert locator.project_root == tmp_path.resolve()
    assert locator.data_dir.exists()
    assert locator.collection_path() == tmp_path.resolve() / "data" / "quotes.json"
    assert locator.mirror_path() == tmp_path.resolve() / "site" / "data" / "quotes.json"
    assert locator.seeds_path() == tmp_path.resolve() / "data" / "seeds.json"
    assert not locator.site_data_dir.exists()


def test_load_settings_layers_file_env_and_overrides(locator: ConfigLocator) -> None:
    locator.settings_path().write_text("max_quotes_per_run: 4\nretry_delay: 0.5\ndry_run: true\n", encoding="utf-8")
    repo = ConfigRepository(locator, load_env_file=False)

    from_file = repo.load_settings(environ={})
    assert (from_file.max_quotes_per_run, from_file.retry_delay, from_file.dry_run) == (4, 0.5, True)

    from_env = repo.load_settings(environ={"MAX_QUOTES_PER_RUN": "2", "DRY_RUN": "off"})
    assert (from_env.max_quotes_per_run, from_env.dry_run) == (2, False)

    overridden = repo.load_settings({"max_quotes_per_run": 7, "dry_run": None}, environ={"MAX_QUOTES_PER_RUN": "2"})
    assert overridden.max_quotes_per_run == 7
    assert overridden.dry_run is True


def test_dotenv_does_not_override_environment(locator: ConfigLocator, monkeypatch: pytest.MonkeyPatch) -> None:
    locator.dotenv_path().write_text('OFFLINE_MODE="yes"\nMAX_QUOTES_PER_RUN=5\n', encoding="utf-8")
    monkeypatch.setenv("MAX_QUOTES_PER_RUN", "2")
    # load_dotenv writes straight into os.environ; register the key so it is undone.
    monkeypatch.setenv("OFFLINE_MODE", "")
    monkeypatch.delenv("OFFLINE_MODE")

    settings = ConfigRepository(locator).load_settings()

    assert settings.offline_mode is True
    assert settings.max_quotes_per_run == 2


def test_invalid_values_raise_config_error(locator: ConfigLocator) -> None:
    repo = ConfigRepository(locator, load_env_file=False)
    with pytest.raises(ConfigError):
        repo.load_settings(environ={"MAX_QUOTES_PER_RUN": "zero"})


def test_settings_file_must_be_mapping(locator: ConfigLocator) -> None:
    locator.settings_path().write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigRepository(locator, load_env_file=False).load_settings(environ={})
