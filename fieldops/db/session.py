from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from fieldops.core.settings import settings

"""
DB Session.

Rôle (fonctionnel) :
- Initialise l’engine SQLAlchemy async utilisé par l’API.
- Fournit la factory AsyncSessionLocal et la dépendance FastAPI `get_db()`.

Notes :
- expire_on_commit=False : les objets restent lisibles après commit (sérialisation des réponses).
- pool_pre_ping : une connexion coupée côté serveur est détectée avant usage.
"""

engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    """Dépendance FastAPI : yield une session DB et garantit sa fermeture."""
    async with AsyncSessionLocal() as session:
        yield session
