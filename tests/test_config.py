from pathlib import Path

import pytest

from qas.config import Config, load_config


def test_config_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("QAS_FAVQS_API_KEY", "secret-token")
    monkeypatch.setenv("QAS_FAVQS_API_URL", "https://example.test/api")
    monkeypatch.setenv("QAS_CACHE_DIR", str(tmp_path / "c"))
    monkeypatch.setenv("QAS_STAGGER_MS", "0")
    monkeypatch.setenv("QAS_MAX_FETCH_WORKERS", "3")

    config = load_config()

    assert config.api_key is not None
    assert config.api_key.get_secret_value() == "secret-token"
    assert config.api_url == "https://example.test/api"
    assert config.cache_dir == tmp_path / "c"
    assert config.stagger_ms == 0
    assert config.max_fetch_workers == 3


def test_defaults_keep_aggregates_shorter_lived(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QAS_BATCH_TTL_SECONDS", raising=False)
    monkeypatch.delenv("QAS_AGGREGATE_TTL_SECONDS", raising=False)

    config = Config()

    assert config.batch_ttl_seconds == 3600
    assert config.aggregate_ttl_seconds <= config.batch_ttl_seconds


def test_aggregate_ttl_clamped_to_batch_ttl(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)

    config = Config(batch_ttl_seconds=60, aggregate_ttl_seconds=600)

    assert config.aggregate_ttl_seconds == 60


def test_fetch_workers_default_and_lower_bound(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QAS_MAX_FETCH_WORKERS", raising=False)

    assert Config().max_fetch_workers == 8

    monkeypatch.setenv("QAS_MAX_FETCH_WORKERS", "0")
    with pytest.raises(ValueError):
        Config()
