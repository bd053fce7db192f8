from __future__ import annotations

import logging

from attendance_summary.config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)


def main() -> None:
    configure_logging()
    logging.getLogger(__name__).debug("Starting with %s", settings.describe())

    from attendance_summary.ui.app import AttendanceSummaryApp

    app = AttendanceSummaryApp()
    app.run()


if __name__ == "__main__":
    main()
