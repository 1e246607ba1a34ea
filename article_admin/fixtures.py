"""
Deterministic seed data for tests and local development.

Every call starts from a known state: ``reset_database`` drops and
re-creates the schema, then the ``load_*`` helpers insert accounts and
articles in a fixed order (so article ids follow "Article 1",
"Article 2", ...).  Nothing here commits; callers own the transaction.

Accounts
--------
``admin`` / ``admin``
    ROLE_ADMIN, first name "Admin", last name "User".
``user`` / ``user``
    default role only.
``user_01`` ... ``user_NN`` / ``user``
    optional extra accounts with default role.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from article_admin.database import Base
from article_admin.models import ROLE_ADMIN, Article, User
from article_admin.security import hash_password

logger = logging.getLogger(__name__)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin"
USER_USERNAME = "user"
USER_PASSWORD = "user"
DEFAULT_ARTICLE_COUNT = 12

_FIRST_NAMES = ["Camille", "Louis", "Chloé", "Hugo", "Léa", "Jules", "Manon", "Arthur"]
_LAST_NAMES = ["Martin", "Bernard", "Dubois", "Thomas", "Robert", "Richard", "Petit"]


async def reset_database(engine: AsyncEngine) -> None:
    """Drop and re-create every table."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def load_users(db: AsyncSession, extra_users: int = 0) -> dict[str, User]:
    """Insert the admin and user accounts (plus *extra_users*), keyed by username."""
    user_hash = hash_password(USER_PASSWORD)
    users = {
        ADMIN_USERNAME: User(
            username=ADMIN_USERNAME,
            first_name="Admin",
            last_name="User",
            roles=[ROLE_ADMIN],
            password_hash=hash_password(ADMIN_PASSWORD),
        ),
        USER_USERNAME: User(
            username=USER_USERNAME,
            first_name="Default",
            last_name="User",
            roles=[],
            password_hash=user_hash,
        ),
    }
    for i in range(1, extra_users + 1):
        username = f"user_{i:02d}"
        users[username] = User(
            username=username,
            first_name=_FIRST_NAMES[i % len(_FIRST_NAMES)],
            last_name=_LAST_NAMES[i % len(_LAST_NAMES)],
            roles=[],
            password_hash=user_hash,
        )

    db.add_all(users.values())
    await db.flush()
    logger.info("Loaded %d user(s)", len(users))
    return users


async def load_articles(
    db: AsyncSession, author: User, count: int = DEFAULT_ARTICLE_COUNT
) -> list[Article]:
    """Insert "Article 1" ... "Article <count>", all written by *author*."""
    articles = []
    for i in range(1, count + 1):
        article = Article(
            title=f"Article {i}",
            content=f"Contenu de l'article {i}. " * 5,
            short_content=f"Résumé de l'article {i}",
            user=author,
        )
        db.add(article)
        articles.append(article)
    await db.flush()
    logger.info("Loaded %d article(s)", len(articles))
    return articles


async def load_all(
    db: AsyncSession,
    extra_users: int = 0,
    articles: int = DEFAULT_ARTICLE_COUNT,
) -> dict[str, User]:
    users = await load_users(db, extra_users=extra_users)
    await load_articles(db, users[ADMIN_USERNAME], count=articles)
    return users
