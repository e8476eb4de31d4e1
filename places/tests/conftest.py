"""
Test fixtures - in-memory SQLite database + HTTP client bound to the app
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from places.database import Base, get_db
from places.main import app
from places.services.association_writer import create_restaurant


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def add_restaurant(db, name, cuisines=(), types=(), neighborhoods=(), tags=(), **fields) -> int:
    return await create_restaurant(
        db,
        {"name": name, **fields},
        {
            "cuisines": list(cuisines),
            "types": list(types),
            "neighborhoods": list(neighborhoods),
            "tags": list(tags),
        },
    )


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """
    Four restaurants across two boroughs:
    - Lucali: Italian, Brooklyn, liked
    - Via Carota: Italian, Manhattan, visited, notes mention negroni
    - Thai Diner: Thai + Diner, Manhattan, tagged brunch
    - Dante: Bar, Manhattan, what_to_order mentions Negroni Sbagliato
    """
    ids = {
        "lucali": await add_restaurant(
            db_session, "Lucali",
            cuisines=["Italian"], types=["Restaurant"], neighborhoods=["Carroll Gardens"],
            borough="Brooklyn", liked=True,
        ),
        "via_carota": await add_restaurant(
            db_session, "Via Carota",
            cuisines=["Italian"], types=["Restaurant"], neighborhoods=["West Village"],
            borough="Manhattan", status="Visited", notes="Great negroni at the bar",
        ),
        "thai_diner": await add_restaurant(
            db_session, "Thai Diner",
            cuisines=["Thai", "Diner"], types=["Restaurant"], neighborhoods=["Nolita"],
            tags=["brunch"], borough="Manhattan",
        ),
        "dante": await add_restaurant(
            db_session, "Dante",
            types=["Bar"], neighborhoods=["West Village"],
            borough="Manhattan", what_to_order="Negroni Sbagliato", happy_hour="Mon-Fri 3-5pm",
        ),
    }
    return ids


@pytest_asyncio.fixture()
async def client(db_session):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
