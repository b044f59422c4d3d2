import json

import pytest

import news
from schemas import NewsIn


def _write(tmp_path, content):
    path = tmp_path / "news.json"
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_seed_gives_newest_entry_the_highest_id(db, tmp_path):
    path = _write(tmp_path, json.dumps([{"title": "Newest"}, {"title": "Older"}]))

    assert news.seed_news(db, path) == 2

    assert [n["title"] for n in news.list_news(db)] == ["Newest", "Older"]


def test_seed_leaves_existing_feed_alone(db, tmp_path):
    news.add_news(db, NewsIn(title="Already here"))
    path = _write(tmp_path, json.dumps([{"title": "Newest"}]))

    assert news.seed_news(db, path) == 0
    assert [n["title"] for n in news.list_news(db)] == ["Already here"]


def test_missing_file_is_skipped(db, tmp_path):
    assert news.seed_news(db, str(tmp_path / "absent.json")) == 0


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"title": "not a list"}),
        json.dumps([{"title": "Good"}, {"excerpt": "no title"}]),
        json.dumps([{"title": "Good"}, "just a string"]),
    ],
)
def test_malformed_file_is_skipped(db, tmp_path, content):
    assert news.seed_news(db, _write(tmp_path, content)) == 0
    assert db["news"].count_documents({}) == 0
