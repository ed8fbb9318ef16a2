"""Seed the database with a demo user and a few draft articles."""
import argparse
import asyncio
import time

from articlehub.database import Base, async_session, engine
from articlehub.models import Article, User
from articlehub.security import hash_password

DEMO_EMAIL = "user@example.com"
DEMO_PASSWORD = "Password123"


async def seed(reset: bool = False, articles: int = 3):
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One transaction: either everything is inserted or nothing is.
    async with async_session() as session, session.begin():
        user = User(
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            first_name="John",
            last_name="Smith",
        )
        session.add(user)
        await session.flush()

        for i in range(1, articles + 1):
            session.add(
                Article(
                    title=f"Hello{i}",
                    description="This is description",
                    content="Some content for the article",
                    author_id=user.id,
                )
            )

    elapsed = time.perf_counter() - start
    print(f"Seeded 1 user ({DEMO_EMAIL}) and {articles} articles in {elapsed:.2f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the articles database")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    parser.add_argument("--articles", type=int, default=3, help="Number of articles to create")
    args = parser.parse_args()
    asyncio.run(seed(reset=args.reset, articles=args.articles))


if __name__ == "__main__":
    main()
