# init_db_async.py — create the user and park tables
import asyncio
import logging

from db_async import engine, Base
import models_user  # noqa: F401  (registers tables on Base.metadata)
import models_park  # noqa: F401

async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logging.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    asyncio.run(main())
