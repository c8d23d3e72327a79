from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from blog_api.database import get_db
from blog_api.dependencies import get_current_user_id
from blog_api.schemas import (
    CommentCreate,
    CommentResponse,
    MessageResponse,
    PostCreate,
    PostDetail,
    PostSummary,
    PostUpdate,
)
from blog_api.services import comment_service, post_service

router = APIRouter(prefix="/api/blogs", tags=["blogs"])

@router.get("", response_model=list[PostSummary])
async def list_posts(db: AsyncSession = Depends(get_db)):
    return await post_service.list_posts(db)

@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await post_service.get_post(db, post_id)

@router.post("", status_code=201, response_model=PostDetail)
async def create_post(
    data: PostCreate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.create_post(db, caller_id, data)

@router.put("/{post_id}", response_model=PostDetail)
async def update_post(
    post_id: int,
    data: PostUpdate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.update_post(db, caller_id, post_id, data)

@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.delete_post(db, caller_id, post_id)

@router.post("/{post_id}/comments", status_code=201, response_model=CommentResponse)
async def add_comment(
    post_id: int,
    data: CommentCreate,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.add_comment(db, caller_id, post_id, data)

@router.delete("/{post_id}/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    post_id: int,
    comment_id: int,
    caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.delete_comment(db, caller_id, post_id, comment_id)
