from __future__ import annotations

import logging
import signal
import sys

from .app import SWEEPER_EXTENSION, create_app

logger = logging.getLogger(__name__)


def install_signal_handlers(sweeper) -> None:
	"""Stop the sweeper on SIGINT/SIGTERM so its thread never blocks exit."""

	def _shutdown(signum, frame):
		logger.info("Received signal %s; stopping flash sale sweeper", signum)
		sweeper.stop()
		sys.exit(0)

	signal.signal(signal.SIGINT, _shutdown)
	signal.signal(signal.SIGTERM, _shutdown)


def main() -> None:
	app = create_app()
	sweeper = app.extensions[SWEEPER_EXTENSION]
	sweeper.start()
	install_signal_handlers(sweeper)
	# Bring the banner in line with the current sales before serving
	sweeper.run_once()
	app.run(host="0.0.0.0", port=app.config["PORT"], use_reloader=False)


if __name__ == "__main__":
	main()
