"""Populate a development database with users, topics, posts and comments."""
import argparse
import asyncio
import random
import time

from forum.database import Base, async_session, engine
from forum.models import Comment, Post, PostTopic, Topic, User
from forum.security import create_access_token

TOPICS = ["golang", "python", "fastapi", "postgresql", "docker", "testing",
          "security", "devops", "frontend", "career"]


async def seed(num_users: int, posts_per_user: int, comments_per_post: int, reset: bool) -> None:
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        topics = [Topic(name=name) for name in TOPICS]
        session.add_all(topics)
        users = [User(username=f"user{i}") for i in range(1, num_users + 1)]
        session.add_all(users)
        await session.flush()
        print(f"  Created {len(topics)} topics, {len(users)} users")

        posts = []
        for user in users:
            for n in range(posts_per_user):
                posts.append(Post(
                    title=f"{user.username} post {n + 1}",
                    content=f"Seeded discussion #{n + 1} started by {user.username}.",
                    author_id=user.id,
                ))
        session.add_all(posts)
        await session.flush()

        for post in posts:
            for topic in random.sample(topics, k=random.randint(1, 3)):
                session.add(PostTopic(post_id=post.id, topic_id=topic.id))
            for _ in range(comments_per_post):
                session.add(Comment(
                    content="Seeded reply.",
                    post_id=post.id,
                    author_id=random.choice(users).id,
                ))
        await session.commit()
        print(f"  Created {len(posts)} posts, {len(posts) * comments_per_post} comments")

        # Handy for trying the mutating endpoints with curl.
        print(f"  Token for {users[0].username}: {create_access_token(users[0].id)}")

    await engine.dispose()
    print(f"Done in {time.perf_counter() - start:.2f}s")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--users", type=int, default=5)
    parser.add_argument("--posts-per-user", type=int, default=3)
    parser.add_argument("--comments-per-post", type=int, default=2)
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args()
    asyncio.run(seed(args.users, args.posts_per_user, args.comments_per_post, args.reset))


if __name__ == "__main__":
    main()
