import json
import os

import pytest

from conftest import ORIGIN
from site_drift.crawler.crawler import crawl_site
from site_drift.crawler.models import SiteNode
from site_drift.errors import SnapshotNotFoundError, SnapshotParseError
from site_drift.snapshot import SnapshotStore


@pytest.mark.asyncio()
async def test_crawled_tree_round_trips(tmp_path, config, docs_site):
    tree = await crawl_site(config, docs_site)
    store = SnapshotStore(tmp_path / "snapshots")

    path = store.save(tree, "docs.example-abc1234")
    loaded = store.load(path)

    assert path == tmp_path / "snapshots" / "docs.example-abc1234.json"
    assert loaded == tree
    assert [n.url for n in loaded.walk()] == [n.url for n in tree.walk()]
    assert [n.depth for n in loaded.walk()] == [0, 1, 1]


def test_saved_document_shape(tmp_path):
    root = SiteNode(url=ORIGIN, title="Home")
    child = root.add_child(f"{ORIGIN}über")
    child.title = "Über"
    path = SnapshotStore(tmp_path).save(root, "shape")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {
        "url": ORIGIN,
        "title": "Home",
        "children": [{"url": f"{ORIGIN}über", "title": "Über", "children": [], "depth": 1}],
        "depth": 0,
    }
    assert "Über" in path.read_text(encoding="utf-8")


def test_load_missing_file(tmp_path):
    with pytest.raises(SnapshotNotFoundError) as exc_info:
        SnapshotStore(tmp_path).load(tmp_path / "nope.json")
    assert isinstance(exc_info.value, FileNotFoundError)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({"title": "no url"}),
        json.dumps({"url": "/", "children": [{"title": "child without url"}]}),
        json.dumps({"url": "/", "depth": -1}),
        json.dumps({"url": "/", "depth": 0, "children": [{"url": "/a", "depth": 7}]}),
        json.dumps({"url": "/", "depth": 2}),
        json.dumps({"url": "/", "children": [{"url": "/a", "children": [{"url": "/a/b", "depth": 1}]}]}),
    ],
)
def test_load_malformed_snapshot(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(SnapshotParseError):
        SnapshotStore(tmp_path).load(path)


def test_legacy_snapshot_without_depth(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(
        json.dumps(
            {
                "url": "https://docs.example",
                "title": "Home",
                "children": [
                    {"url": "https://docs.example/a", "title": "A", "children": [{"url": "https://docs.example/a/b"}]}
                ],
            }
        ),
        encoding="utf-8",
    )

    tree = SnapshotStore(tmp_path).load(path)

    assert [n.depth for n in tree.walk()] == [0, 1, 2]
    assert tree.children[0].children[0].title == ""


def test_list_and_latest(tmp_path):
    store = SnapshotStore(tmp_path)
    old = store.save(SiteNode(url=ORIGIN), "docs.example-aaaaaaa")
    new = store.save(SiteNode(url=ORIGIN), "docs.example-bbbbbbb")
    other = store.save(SiteNode(url="https://other.example/"), "other.example-ccccccc")
    lookalike = store.save(SiteNode(url="https://docs.example-foo/"), "docs.example-foo-ddddddd")
    os.utime(old, (1_000, 1_000))
    os.utime(new, (2_000, 2_000))
    os.utime(other, (3_000, 3_000))
    os.utime(lookalike, (4_000, 4_000))

    assert store.list() == [lookalike, other, new, old]
    assert store.latest("docs.example-foo") == lookalike
    assert store.latest("docs.example") == new
    assert store.latest("missing.example") is None
    assert SnapshotStore(tmp_path / "absent").list() == []
