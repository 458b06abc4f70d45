import pytest

from conclave_engine import ANONYMOUS_NAME, DEFAULT_TOPIC, add_reply, create_post, list_posts

PRIYA_ID = 1
HOPE_ID = 7


def test_seeded_posts_hide_anonymous_authors():
    posts = list_posts()

    assert len(posts) == 3
    anonymous = [p for p in posts if p["isAnonymous"]]
    assert anonymous
    assert all(p["authorName"] == ANONYMOUS_NAME for p in anonymous)


def test_filter_by_topic():
    posts = list_posts(topic="Community Events")

    assert [p["authorName"] for p in posts] == ["Hope Foundation"]


def test_create_post_normalizes_tags_and_topic():
    post = create_post(PRIYA_ID, "Question about screening", "When should I start?", tags=["BSE", "bse", " Support "])

    assert post["authorName"] == "Priya Sharma"
    assert post["topic"] == DEFAULT_TOPIC
    assert post["tags"] == ["bse", "support"]
    assert post["replies"] == []


def test_anonymous_post_does_not_show_name():
    post = create_post(PRIYA_ID, "Private worry", "Feeling anxious", is_anonymous=True)

    assert post["authorName"] == ANONYMOUS_NAME
    assert post["isAnonymous"] is True


@pytest.mark.parametrize(
    "title,content,tags",
    [
        ("", "content", None),
        ("title", "   ", None),
        ("x" * 201, "content", None),
        ("title", "content", "not-a-list"),
    ],
)
def test_invalid_posts(title, content, tags):
    with pytest.raises(ValueError):
        create_post(PRIYA_ID, title, content, tags=tags)


def test_unknown_author_is_rejected():
    with pytest.raises(LookupError):
        create_post(999, "title", "content")


def test_reply_is_added_to_post():
    post = create_post(PRIYA_ID, "Question", "Anyone?")

    updated = add_reply(post["id"], HOPE_ID, "We are here to help.")

    assert len(updated["replies"]) == 1
    assert updated["replies"][0]["authorName"] == "Hope Foundation"


def test_reply_to_missing_post():
    with pytest.raises(LookupError):
        add_reply(999, HOPE_ID, "Hello")
