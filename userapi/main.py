import asyncio
import logging
import sys

import uvicorn

from userapi.api.main import create_app
from userapi.api.settings import Settings, create_dsn, get_settings
from userapi.db.connection import Database
from userapi.errors import StartupError


async def serve(settings: Settings) -> int:
    database = Database(create_dsn(settings))

    # The service does not start without its database
    try:
        await database.connect()
    except StartupError as e:
        logging.critical(f"Failed to connect to Postgres: {e}")
        return 1

    config = uvicorn.Config(
        app=create_app(database),
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()
    return 0


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    sys.exit(asyncio.run(serve(settings)))


if __name__ == "__main__":
    main()
