"""
Comment service: comments embedded in the Post aggregate.

Comments have no life of their own: they are always reached through
their post, and a comment id is only meaningful within that post's
collection.  Any authenticated user may comment; a comment may be
removed by its own author or by the author of the post it sits on.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blog_api.exceptions import Forbidden, NotFound
from blog_api.models import Comment, utcnow
from blog_api.schemas import CommentCreate
from blog_api.services.post_service import comment_to_dict, load_post

logger = logging.getLogger(__name__)


def _find_comment(comments: list[Comment], comment_id: int) -> Comment | None:
    for comment in comments:
        if comment.id == comment_id:
            return comment
    return None


async def add_comment(
    db: AsyncSession,
    caller_id: int,
    post_id: int,
    data: CommentCreate,
) -> dict:
    """
    Prepend a comment by *caller_id* to the post identified by *post_id*
    and return it with its author as stored.

    Raises ``NotFound`` when the post does not exist.
    """
    post = await load_post(db, post_id)

    comment = Comment(content=data.content, author_id=caller_id, created_at=utcnow())
    post.comments.insert(0, comment)
    await db.flush()

    # Re-read so the response reflects the stored row and author record.
    q = (
        select(Comment)
        .where(Comment.id == comment.id, Comment.post_id == post_id)
        .options(joinedload(Comment.author))
        .execution_options(populate_existing=True)
    )
    stored = (await db.execute(q)).scalar_one()

    logger.info("User id=%s commented on post id=%s (comment id=%s)", caller_id, post_id, stored.id)
    return comment_to_dict(stored)


async def delete_comment(
    db: AsyncSession,
    caller_id: int,
    post_id: int,
    comment_id: int,
) -> dict:
    """
    Remove *comment_id* from the post identified by *post_id*.

    Allowed for the comment's author and for the post's author.  The
    remaining comments keep their order.
    """
    post = await load_post(db, post_id)

    comment = _find_comment(post.comments, comment_id)
    if comment is None:
        raise NotFound("Comment not found")

    if caller_id not in (comment.author_id, post.author_id):
        logger.warning(
            "User id=%s denied deletion of comment id=%s on post id=%s",
            caller_id, comment_id, post_id,
        )
        raise Forbidden("Not authorized to delete comment")

    post.comments.remove(comment)
    await db.flush()

    logger.info("User id=%s deleted comment id=%s on post id=%s", caller_id, comment_id, post_id)
    return {"message": "Comment deleted"}
