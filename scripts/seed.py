"""Reset the database and load the deterministic admin fixtures."""
import argparse
import asyncio
import logging
import time

from article_admin.database import async_session, engine
from article_admin.fixtures import DEFAULT_ARTICLE_COUNT, load_all, reset_database

logger = logging.getLogger("seed")


async def seed(extra_users: int, articles: int) -> None:
    start = time.perf_counter()

    await reset_database(engine)
    async with async_session() as session:
        await load_all(session, extra_users=extra_users, articles=articles)
        await session.commit()
    await engine.dispose()

    logger.info(
        "Seeding complete in %.1fs: %d user(s), %d article(s)",
        time.perf_counter() - start,
        extra_users + 2,
        articles,
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the article admin database")
    parser.add_argument("--users", type=int, default=15, help="Extra non-admin accounts to create")
    parser.add_argument(
        "--articles", type=int, default=DEFAULT_ARTICLE_COUNT, help="Number of sample articles"
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(seed(extra_users=args.users, articles=args.articles))


if __name__ == "__main__":
    main()
