"""CLI behaviour for the locus entry point."""

from __future__ import annotations

import json
import logging

import pytest

from locus import cli
from locus.core import clean

_ENV_VARS = (
    "LOCUS_CONFIG",
    "LOCUS_ROOT",
    "LOCUS_BASE_URL",
    "LOCUS_PATHS",
    "LOCUS_INSTANCE",
    "LOCUS_EVENT_LOG",
    "LOCUS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOCUS_ENV_FILE", str(tmp_path / "absent.env"))


@pytest.fixture
def site(tmp_path, touch):
    root = tmp_path / "www"
    touch(root / "assets" / "app.css")
    manifest = tmp_path / "locus.json"
    manifest.write_text(
        json.dumps({"root": str(root), "aliases": {"default": [str(root / "assets")]}}),
        encoding="utf-8",
    )
    return root, manifest


def test_resolve_prints_path(site, capsys) -> None:
    root, manifest = site

    exit_code = cli.main(["--config", str(manifest), "resolve", "default:app.css"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == clean(str(root / "assets" / "app.css"))


def test_resolve_miss_exits_non_zero(site, caplog) -> None:
    _, manifest = site

    with caplog.at_level(logging.ERROR, logger="locus.cli"):
        exit_code = cli.main(["--config", str(manifest), "resolve", "default:missing.css"])

    assert exit_code == 1
    assert any("Unresolved reference" in message for message in caplog.messages)


def test_paths_prints_json(site, capsys) -> None:
    root, manifest = site

    assert cli.main(["--config", str(manifest), "paths", "default:"]) == 0
    assert json.loads(capsys.readouterr().out) == [clean(str(root / "assets"))]


def test_urn_and_uri(site, capsys) -> None:
    _, manifest = site
    base = ["--config", str(manifest), "--base-url", "https://test.dev/"]

    assert cli.main(base + ["urn", "default:app.css", "--exists"]) == 0
    assert capsys.readouterr().out.strip() == "assets/app.css"

    assert cli.main(base + ["uri", "default:app.css?v=2"]) == 0
    assert capsys.readouterr().out.strip() == "https://test.dev/assets/app.css?v=2"

    assert cli.main(base + ["uri", "default:missing.css"]) == 1


def test_urn_without_root_fails(tmp_path, caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="locus.cli"):
        exit_code = cli.main(["urn", str(tmp_path / "file.txt")])

    assert exit_code == 1
    assert any("root directory" in message for message in caplog.messages)


def test_invalid_manifest_is_reported(tmp_path, caplog) -> None:
    manifest = tmp_path / "bad.json"
    manifest.write_text(json.dumps({"aliases": {"ab": ["/srv"]}}), encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="locus.cli"):
        exit_code = cli.main(["--config", str(manifest), "check"])

    assert exit_code == 1
    assert any("Invalid configuration" in message for message in caplog.messages)
    assert any(message.startswith("  - aliases") for message in caplog.messages)


def test_check_summarises_instances(site, capsys, monkeypatch, tmp_path) -> None:
    root, manifest = site
    extra = tmp_path / "extra"
    extra.mkdir()
    monkeypatch.setenv("LOCUS_PATHS", str(extra))

    assert cli.main(["--config", str(manifest), "check"]) == 0
    payload = json.loads(capsys.readouterr().out)

    assert payload["default"]["root"] == clean(str(root))
    assert payload["default"]["aliases"]["default"] == [
        clean(str(root / "assets")),
        clean(str(extra)),
    ]


def test_root_option_overrides_environment(tmp_path, capsys, monkeypatch, touch) -> None:
    touch(tmp_path / "site" / "index.html")
    monkeypatch.setenv("LOCUS_ROOT", str(tmp_path))

    assert cli.main(["--root", str(tmp_path / "site"), "urn", str(tmp_path / "site" / "index.html")]) == 0
    assert capsys.readouterr().out.strip() == "index.html"
