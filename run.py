import asyncio
import logging

import config
from utils.config_validator import validate_or_exit
from utils.logging_config import setup_logging

validate_or_exit(config)

# Initialize centralized logging configuration
setup_logging()

# Silence SQL loggers, statements would drown the pricing logs
for logger_name in ['aiosqlite', 'sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm']:
    logging.getLogger(logger_name).setLevel(logging.WARNING)

from db import create_db_and_tables


async def main():
    await create_db_and_tables()
    logging.info(
        f"Pricing engine ready: environment={config.RUNTIME_ENVIRONMENT.value}, "
        f"currency={config.CURRENCY.value}, duplicate tiers={config.DUPLICATE_TIER_POLICY.value}"
    )


if __name__ == '__main__':
    asyncio.run(main())
