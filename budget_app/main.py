# main.py
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from budget_app.utils.config import (
    DATABASE_URL, HOST, PORT, LOG_LEVEL, METRICS_CRON_DAY, METRICS_CRON_HOUR,
)
from budget_app.utils.logging_setup import configure_logging
from budget_app.models import init_db, create_session_factory
from budget_app.web_app import create_app
from budget_app.handlers.monthly_report_handler import snapshot_monthly_metrics

logger = logging.getLogger(__name__)


def build_scheduler(session_factory):
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        snapshot_monthly_metrics,
        CronTrigger(day=METRICS_CRON_DAY, hour=METRICS_CRON_HOUR, minute=0),
        args=[session_factory],
        id="monthly-metrics",
    )
    return scheduler


def main():
    configure_logging(LOG_LEVEL)

    # One engine (and connection pool) for the whole process
    engine = init_db(DATABASE_URL)
    session_factory = create_session_factory(engine)
    app = create_app(session_factory=session_factory)

    scheduler = build_scheduler(session_factory)
    scheduler.start()

    logger.info("Starting server on %s:%s", HOST, PORT)
    try:
        app.run(host=HOST, port=PORT)
    finally:
        scheduler.shutdown()


if __name__ == "__main__":
    main()
