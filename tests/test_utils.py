import re
import subprocess

import pytest

from site_drift import utils
from site_drift.utils import normalize_url, snapshot_identifier, url_id


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://docs.trunk.io", "docs.trunk.io"),
        ("https://docs.trunk.io/", "docs.trunk.io"),
        ("https://docs.trunk.io/cli/getting-started/", "docs.trunk.io_cli_getting-started"),
        ("http://localhost:8080/docs", "localhost_8080_docs"),
        ("https://docs.example/search?q=a b", "docs.example_search_q_a_b"),
    ],
)
def test_url_id(url, expected):
    assert url_id(url) == expected


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://docs.example", "https://docs.example/"),
        ("HTTPS://Docs.Example/Guide", "https://docs.example/Guide"),
        ("https://docs.example/guide#install", "https://docs.example/guide"),
        ("https://docs.example/search?q=1#top", "https://docs.example/search?q=1"),
    ],
)
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


def test_normalize_url_rejects_broken_host():
    with pytest.raises(ValueError):
        normalize_url("http://[broken")


def test_revision_marker_uses_git(monkeypatch):
    def fake_run(cmd, **kwargs):
        assert cmd == ["git", "rev-parse", "--short", "HEAD"]
        return subprocess.CompletedProcess(cmd, 0, stdout="1a2b3c4\n", stderr="")

    monkeypatch.setattr(utils.subprocess, "run", fake_run)
    assert utils.revision_marker() == "1a2b3c4"


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("git"), subprocess.CalledProcessError(128, ["git"])],
)
def test_revision_marker_falls_back_to_timestamp(monkeypatch, error):
    def fake_run(cmd, **kwargs):
        raise error

    monkeypatch.setattr(utils.subprocess, "run", fake_run)
    assert re.fullmatch(r"\d{8}T\d{6}Z", utils.revision_marker())


def test_snapshot_identifier():
    assert snapshot_identifier("https://docs.trunk.io/", "abc1234") == "docs.trunk.io-abc1234"


def test_snapshot_identifier_rejects_dashed_revision():
    with pytest.raises(ValueError):
        snapshot_identifier("https://docs.trunk.io/", "release-2")
