from __future__ import annotations

import json
from pathlib import Path

import pytest

from sentiment_analytics.cli import build_parser, main

RECORDS = [
    {
        "value": v,
        "source": "web",
        "created": created,
        "skip": False,
        "id": f"a{i}",
        "user": "u1",
        "company": {"id": 1, "isin": "A", "title": "Acme", "tid": 5},
        "question": {"fullText": "Q?", "shortText": "Q", "tag": "growth", "id": "q1"},
    }
    for i, (v, created) in enumerate([(1, "2024-01-01"), (3, "2024-01-02"), (5, "2024-01-09")])
]


@pytest.fixture
def dataset(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SECTOR_NAMES_PATH", raising=False)
    path = tmp_path / "data.json"
    path.write_text(json.dumps(RECORDS), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["overview"])
    assert args.smoothing == 7
    assert args.window == 7
    assert args.start is None


def test_overview_writes_json(dataset: Path, tmp_path: Path) -> None:
    names = tmp_path / "sectors.json"
    names.write_text(json.dumps({"5": "Retail"}), encoding="utf-8")
    out = tmp_path / "out" / "overview.json"

    main(["overview", "--input", str(dataset), "--sector-names", str(names), "--out", str(out)])

    data = json.loads(out.read_text(encoding="utf-8"))
    assert [p["date"] for p in data["daily_series"]] == ["2024-01-01", "2024-01-02", "2024-01-09"]
    assert data["sector_stats"][0]["label"] == "Retail"
    assert (tmp_path / "logs" / "analytics.log").exists()


def test_company_prints_json(dataset: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["company", "A", "--input", str(dataset), "--smoothing", "1", "--tag", "growth"])
    data = json.loads(capsys.readouterr().out)
    assert data["company"]["title"] == "Acme"
    assert len(data["tag_series"]["growth"]) == 3


def test_missing_input_exits_1(dataset: Path, tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["overview", "--input", str(tmp_path / "missing.json")])
    assert exc.value.code == 1


def test_invalid_window_exits_2(dataset: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["overview", "--input", str(dataset), "--window", "0"])
    assert exc.value.code == 2


def test_missing_url_exits_2(dataset: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANSWERS_DATA_URL", raising=False)
    with pytest.raises(SystemExit) as exc:
        main(["fetch"])
    assert exc.value.code == 2


def test_corrupt_cached_download_is_refetched(
    dataset: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import requests

    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    cached = cache_dir / "data.json.gz"
    cached.write_bytes(b"\x1f\x8b\x08truncated")
    monkeypatch.setenv("ANSWERS_DATA_URL", "https://example.com/data.json.gz")
    monkeypatch.setenv("DATA_CACHE_DIR", str(cache_dir))

    class _Response:
        content = dataset.read_bytes()

        def raise_for_status(self) -> None:
            pass

    calls: list[str] = []

    def fake_get(url: str, **kwargs) -> _Response:
        calls.append(url)
        return _Response()

    monkeypatch.setattr(requests, "get", fake_get)

    out = tmp_path / "overview.json"
    with pytest.raises(SystemExit) as exc:
        main(["overview", "--out", str(out)])
    assert exc.value.code == 1
    assert not cached.exists()
    assert calls == []

    main(["overview", "--out", str(out)])
    assert len(calls) == 1
    assert len(json.loads(out.read_text(encoding="utf-8"))["daily_series"]) == 3


def test_log_level_flag() -> None:
    args = build_parser().parse_args(["--log-level", "debug", "overview"])
    assert args.log_level == "DEBUG"
