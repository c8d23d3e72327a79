"""Database seeder: demo users, posts and comments.

Everything goes through the service layer so seeded data obeys the same
rules (hashed passwords, ownership, newest-first comments) as API data.
"""
import asyncio
import argparse
import logging
import random
import time

from blog_api.database import engine, async_session, Base
from blog_api.schemas import CommentCreate, PostCreate, RegisterRequest
from blog_api.services import comment_service, post_service, user_service

logger = logging.getLogger("seed")

TOPICS = ["python", "fastapi", "postgresql", "docker", "testing", "security",
          "asyncio", "sqlalchemy", "devops", "performance"]

DEMO_PASSWORD = "password123"


async def seed(small: bool = False):
    num_users = 5 if small else 25
    num_posts = 20 if small else 500
    max_comments_per_post = 2 if small else 6

    logger.info("Seeding: %d users, %d posts, up to %d comments each",
                num_users, num_posts, max_comments_per_post)
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        user_ids = []
        for i in range(num_users):
            result = await user_service.register(session, RegisterRequest(
                name=f"User {i}",
                email=f"user_{i:04d}@example.com",
                password=DEMO_PASSWORD,
            ))
            user_ids.append(result["user"]["id"])
        logger.info("Created %d users (password %r)", len(user_ids), DEMO_PASSWORD)

        total_comments = 0
        for i in range(num_posts):
            topic = random.choice(TOPICS)
            post = await post_service.create_post(session, random.choice(user_ids), PostCreate(
                title=f"Post {i}: Notes on {topic}",
                content=f"This is the full content of post {i} about {topic}. " * 10,
            ))
            for _ in range(random.randint(0, max_comments_per_post)):
                await comment_service.add_comment(
                    session,
                    random.choice(user_ids),
                    post["id"],
                    CommentCreate(content=f"Thanks for writing about {topic}!"),
                )
                total_comments += 1
        await session.commit()

    elapsed = time.perf_counter() - start
    logger.info("Seeding complete in %.1fs: %d users, %d posts, %d comments",
                elapsed, num_users, num_posts, total_comments)


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (20 posts)")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
