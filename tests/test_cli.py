import json
from contextlib import nullcontext
from pathlib import Path

import pytest
from factories import FakeClient, make_batch
from typer.testing import CliRunner

from qas.cache.base import DiskCacheStore
from qas.cache.quotes import QuoteCache
from qas.cli.main import app
from qas.exceptions import UpstreamError
from qas.services.aggregator import QuoteAggregator

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("QAS_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("QAS_FAVQS_API_KEY", "secret")
    return tmp_path


class TrackingStore(DiskCacheStore):
    closed = False

    def close(self) -> None:
        super().close()
        self.closed = True


def _patch_service(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, client: FakeClient) -> TrackingStore:
    store = TrackingStore(tmp_path / "svc")

    def build(api_key: str | None = None, config=None):
        return QuoteAggregator(QuoteCache(store), client, stagger_seconds=0), nullcontext()

    monkeypatch.setattr("qas.cli.commands.quotes.build_aggregator", build)
    return store


def test_quotes_json_output(monkeypatch: pytest.MonkeyPatch, isolated_env: Path) -> None:
    _patch_service(monkeypatch, isolated_env, FakeClient([make_batch(1, 2), make_batch(3)]))

    result = runner.invoke(app, ["quotes", "--count", "2", "--page-size", "2", "--tag", "joy", "--format", "json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [item["id"] for item in payload["items"]] == ["1", "2"]
    assert payload["pagination"] == {"page": 1, "pageSize": 2, "totalRequested": 2, "hasMore": False}


def test_quotes_json_written_to_file(monkeypatch: pytest.MonkeyPatch, isolated_env: Path) -> None:
    _patch_service(monkeypatch, isolated_env, FakeClient([make_batch(1, 2), make_batch(3, 4)]))
    output = isolated_env / "out" / "quotes.json"

    result = runner.invoke(app, ["quotes", "-n", "2", "-s", "2", "-f", "json", "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text())["pagination"]["totalRequested"] == 2
    assert [item["id"] for item in json.loads(output.read_text())["items"]] == ["1", "2"]


def test_quotes_table_output(monkeypatch: pytest.MonkeyPatch, isolated_env: Path) -> None:
    _patch_service(monkeypatch, isolated_env, FakeClient([make_batch(1, 2), make_batch(3, 4)]))

    result = runner.invoke(app, ["quotes", "--count", "2", "--page-size", "2"])

    assert result.exit_code == 0, result.output
    assert "Random quotes" in result.stdout
    assert "2 requested" in result.stdout


def test_upstream_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch, isolated_env: Path) -> None:
    store = _patch_service(monkeypatch, isolated_env, FakeClient(error=UpstreamError(500, "boom")))

    result = runner.invoke(app, ["quotes", "--count", "2"])

    assert result.exit_code == 1
    assert store.closed


def test_quotes_closes_cache_store(monkeypatch: pytest.MonkeyPatch, isolated_env: Path) -> None:
    store = _patch_service(monkeypatch, isolated_env, FakeClient([make_batch(1, 2), make_batch(3)]))

    result = runner.invoke(app, ["quotes", "--count", "2", "--page-size", "2", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert store.closed


def test_page_size_above_limit_is_rejected() -> None:
    result = runner.invoke(app, ["quotes", "--count", "2", "--page-size", "51"])

    assert result.exit_code == 2


def test_cache_info_and_clear(isolated_env: Path) -> None:
    info = runner.invoke(app, ["cache-info"])
    cleared = runner.invoke(app, ["cache-clear", "--yes"])

    assert info.exit_code == 0, info.output
    assert str(isolated_env / "cache") in info.stdout.replace("\n", "")
    assert cleared.exit_code == 0
    assert "Cache cleared" in cleared.stdout
