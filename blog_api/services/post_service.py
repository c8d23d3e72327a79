"""
Post service: business logic for the Post aggregate.

Design notes
------------
- A post is only ever mutated by its author.  Every mutation loads the
  post first, so a missing id is always ``NotFound`` and only an existing
  post can yield ``Forbidden``.
- Eager loading via ``joinedload`` (many-to-one: author) and
  ``selectinload`` (one-to-many: comments) is used throughout; all
  relationships are ``lazy="noload"`` so nothing is fetched implicitly.
- Service functions flush but do not commit; the transaction boundary
  is owned by the ``get_db`` dependency in the router layer.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from blog_api.config import settings
from blog_api.database import is_storable_id
from blog_api.exceptions import Forbidden, NotFound, Unauthenticated
from blog_api.models import Comment, Post, utcnow
from blog_api.schemas import PostCreate, PostUpdate
from blog_api.services.user_service import get_user, user_to_public

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def _isoformat(value) -> str | None:
    return value.isoformat() if value else None


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "author": user_to_public(comment.author),
        "created_at": _isoformat(comment.created_at),
    }


def _post_base(post: Post) -> dict:
    return {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "author": user_to_public(post.author),
        "created_at": _isoformat(post.created_at),
        "updated_at": _isoformat(post.updated_at),
    }


def post_to_summary(post: Post, comment_count: int) -> dict:
    """Serialise a Post for the list view (comments are not expanded)."""
    data = _post_base(post)
    data["comment_count"] = comment_count
    return data


def post_to_detail(post: Post) -> dict:
    """Serialise a Post with its full, newest-first comment list."""
    data = _post_base(post)
    data["comments"] = [comment_to_dict(c) for c in post.comments]
    return data


# ---------------------------------------------------------------------------
# Loading / authorization helpers
# ---------------------------------------------------------------------------

async def load_post(db: AsyncSession, post_id: int) -> Post:
    """
    Fetch *post_id* with its author and its comments (with their authors),
    raising ``NotFound`` when it does not exist.

    Ids no row could carry are answered without a query.
    """
    if not is_storable_id(post_id):
        raise NotFound("Post not found")

    q = (
        select(Post)
        .where(Post.id == post_id)
        .options(
            joinedload(Post.author),
            selectinload(Post.comments).joinedload(Comment.author),
        )
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    post = result.unique().scalar_one_or_none()
    if post is None:
        raise NotFound("Post not found")
    return post


def ensure_author(post: Post, caller_id: int) -> None:
    if post.author_id != caller_id:
        logger.warning("User id=%s denied mutation of post id=%s", caller_id, post.id)
        raise Forbidden("Not the author")


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def list_posts(db: AsyncSession) -> list[dict]:
    """
    Return at most ``settings.POST_LIST_LIMIT`` posts, newest first, each
    with its author and a comment count.
    """
    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )
    q = (
        select(Post, comment_count)
        .options(joinedload(Post.author))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(settings.POST_LIST_LIMIT)
    )
    result = await db.execute(q)
    return [post_to_summary(post, count) for post, count in result.all()]


async def get_post(db: AsyncSession, post_id: int) -> dict:
    post = await load_post(db, post_id)
    return post_to_detail(post)


async def create_post(db: AsyncSession, caller_id: int, data: PostCreate) -> dict:
    """
    Create a post authored by *caller_id*.

    The caller is re-resolved against the users table: a valid token for
    an account that no longer exists is treated as unauthenticated.
    """
    author = await get_user(db, caller_id)
    if author is None:
        raise Unauthenticated("User not found")

    now = utcnow()
    post = Post(
        title=data.title,
        content=data.content,
        author_id=author.id,
        created_at=now,
        updated_at=now,
        comments=[],
    )
    db.add(post)
    await db.flush()
    post.author = author

    logger.info("User id=%s created post id=%s", caller_id, post.id)
    return post_to_detail(post)


async def update_post(db: AsyncSession, caller_id: int, post_id: int, data: PostUpdate) -> dict:
    """
    Apply a partial update to a post owned by *caller_id*.

    Only fields explicitly set in the request payload are modified
    (``model_dump(exclude_unset=True)``).
    """
    post = await load_post(db, post_id)
    ensure_author(post, caller_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(post, field, value)

    if update_data:
        await db.flush()
        logger.info("User id=%s updated post id=%s (%s)", caller_id, post_id, ", ".join(update_data))
    return post_to_detail(post)


async def delete_post(db: AsyncSession, caller_id: int, post_id: int) -> dict:
    """Delete a post owned by *caller_id*; its comments go with it."""
    post = await load_post(db, post_id)
    ensure_author(post, caller_id)

    await db.delete(post)
    await db.flush()

    logger.info("User id=%s deleted post id=%s", caller_id, post_id)
    return {"message": "Post removed"}
