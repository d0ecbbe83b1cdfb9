"""
建表并写入 SmartJoules 演示数据

用法:
    python scripts/setup_db.py            # 创建缺失的表，写入种子数据
    python scripts/setup_db.py --reset    # 先删除所有表
"""
import argparse
import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

from loguru import logger  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.database import AsyncSessionLocal, close_db, drop_db, init_db  # noqa: E402
from app.core.logging import setup_logging  # noqa: E402
from app.services.seed import seed_database  # noqa: E402


def parse_args():
    parser = argparse.ArgumentParser(description="Create tables and seed demo data")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop all tables before creating them",
    )
    return parser.parse_args()


async def setup(reset: bool = False) -> bool:
    """种子数据校验发现问题时返回 False"""
    logger.info("Database: {}", settings.database_url)
    (ROOT_DIR / "data").mkdir(parents=True, exist_ok=True)

    try:
        if reset:
            logger.warning("Dropping all tables")
            await drop_db()
        await init_db()
        logger.info("Tables ready")

        async with AsyncSessionLocal() as db:
            try:
                report = await seed_database(db)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
    finally:
        await close_db()

    counts = report.counts()
    logger.info(
        "Company, roles and personas: {} inserted, {} updated, {} skipped",
        counts["inserted"], counts["updated"], counts["skipped"],
    )
    return report.ok


def main():
    args = parse_args()
    setup_logging()
    ok = asyncio.run(setup(reset=args.reset))
    if not ok:
        logger.error("Seed finished with problems")
        sys.exit(1)
    logger.info("Setup completed")


if __name__ == "__main__":
    main()
