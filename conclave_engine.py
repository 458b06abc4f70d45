from datetime import datetime, timezone

from models import (
    add_forum_reply,
    create_forum_post,
    get_forum_post,
    get_forum_replies,
    get_user,
    list_forum_posts,
)

ANONYMOUS_NAME = "Anonymous"
DEFAULT_TOPIC = "General"


def _now_iso():
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _require_text(value, field_name, max_length):
    text = str(value or "").strip()
    if not text:
        raise ValueError(f"{field_name} is required")
    if len(text) > max_length:
        raise ValueError(f"{field_name} must be at most {max_length} characters")
    return text


def _normalize_tags(tags):
    if tags is None:
        return []
    if not isinstance(tags, list):
        raise ValueError("tags must be a list")
    normalized = []
    for tag in tags:
        tag_text = str(tag).strip().lower()
        if tag_text and tag_text not in normalized:
            normalized.append(tag_text)
    return normalized


def _get_author(user_id):
    author = get_user(user_id)
    if not author:
        raise LookupError("User not found")
    return author


def _reply_to_response(reply):
    return {
        "id": reply["id"],
        "authorName": ANONYMOUS_NAME if reply["is_anonymous"] else reply["author_name"],
        "isAnonymous": reply["is_anonymous"],
        "content": reply["content"],
        "createdAt": reply["created_at"],
    }


def post_to_response(post):
    return {
        "id": post["id"],
        "authorName": ANONYMOUS_NAME if post["is_anonymous"] else post["author_name"],
        "authorRole": post["author_role"],
        "isAnonymous": post["is_anonymous"],
        "topic": post["topic"],
        "title": post["title"],
        "content": post["content"],
        "tags": post["tags"],
        "createdAt": post["created_at"],
        "replies": [_reply_to_response(r) for r in get_forum_replies(post["id"])],
    }


def list_posts(topic=None):
    return [post_to_response(post) for post in list_forum_posts(topic=topic)]


def create_post(user_id, title, content, topic=None, is_anonymous=False, tags=None):
    author = _get_author(user_id)
    post_id = create_forum_post(
        user_id=author["id"],
        author_name=author["name"],
        author_role=author["role"],
        is_anonymous=bool(is_anonymous),
        topic=str(topic or "").strip() or DEFAULT_TOPIC,
        title=_require_text(title, "title", 200),
        content=_require_text(content, "content", 5000),
        tags=_normalize_tags(tags),
        created_at=_now_iso(),
    )
    return post_to_response(get_forum_post(post_id))


def add_reply(post_id, user_id, content, is_anonymous=False):
    post = get_forum_post(post_id)
    if not post:
        raise LookupError("Post not found")
    author = _get_author(user_id)
    add_forum_reply(
        post_id=post["id"],
        user_id=author["id"],
        author_name=author["name"],
        is_anonymous=bool(is_anonymous),
        content=_require_text(content, "content", 5000),
        created_at=_now_iso(),
    )
    return post_to_response(post)
