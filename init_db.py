"""Initialize database tables"""
import asyncio
from places.database import engine, Base, database_url
from places.models import *  # noqa: F401,F403 - Import all models to register them


async def init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print(f"Database tables created successfully at {database_url}.")


if __name__ == "__main__":
    asyncio.run(init())
