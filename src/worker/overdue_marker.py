"""Overdue Invoice Background Worker

Periodically moves issued invoices whose due date has passed to overdue.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.invoicing import MarkOverdueInvoices, MarkOverdueResultDTO

logger = logging.getLogger(__name__)


class OverdueMarkerWorker:
    """
    Background worker for overdue marking

    Features:
    - Marks issued invoices with due_date before today as overdue
    - Safe to re-run: invoices already marked are skipped
    - Can run once or continuously
    - Configurable interval (default: hourly)

    Usage:
        # Run once
        worker = OverdueMarkerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = OverdueMarkerWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(self, db_uri: Optional[str] = None):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("OverdueMarkerWorker initialized")

    async def run_once(self, as_of: Optional[date] = None) -> MarkOverdueResultDTO:
        """
        Mark overdue invoices once

        Args:
            as_of: Reference date (default: today); invoices due before it are marked

        Returns:
            MarkOverdueResultDTO with the marked invoice IDs
        """
        as_of = as_of or date.today()

        if not getattr(ApplicationConfig, "OVERDUE_MARKING_ENABLED", True):
            logger.info("Overdue marking is disabled, skipping")
            return MarkOverdueResultDTO(
                as_of=as_of,
                invoices_marked=0,
                invoice_ids=[],
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = MarkOverdueInvoices(
                uow=SqlAlchemyUnitOfWork(session),
                invoice_repo=SqlAlchemyInvoiceRepository(session),
            )

            result = await use_case.execute(as_of)

            if result.is_err():
                logger.error(f"Overdue marking failed: {result.error.message}")
                raise RuntimeError(f"Overdue marking failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 3600):
        """
        Mark overdue invoices continuously at the specified interval

        Args:
            interval_seconds: Seconds between runs (default: 1 hour)
        """
        logger.info(f"Starting continuous overdue marking with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Overdue marking cycle complete. "
                    f"Marked {result.invoices_marked} invoices as of {result.as_of} "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Overdue marking cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("OverdueMarkerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.overdue_marker --once

        # Run continuously (default: OVERDUE_CHECK_INTERVAL_SECONDS)
        python -m src.worker.overdue_marker

        # Run continuously with custom interval (in seconds)
        python -m src.worker.overdue_marker --interval 600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Overdue Invoice Marking Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.OVERDUE_CHECK_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: OVERDUE_CHECK_INTERVAL_SECONDS)"
    )
    args = parser.parse_args()

    worker = OverdueMarkerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Overdue marking complete:")
            print(f"  As of: {result.as_of}")
            print(f"  Invoices marked: {result.invoices_marked}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            if result.invoice_ids:
                print(f"  Invoice IDs: {', '.join(str(i) for i in result.invoice_ids)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
