#!/usr/bin/env python3
"""
Service wrapper for smoke-buddy that runs continuously.
Serves the Slack webhook and runs the daily reset/summary jobs.
"""

import os
import threading

import uvicorn

from smoke_buddy.api.v1.slack import get_context
from smoke_buddy.app import app
from smoke_buddy.journal import log, log_error
from smoke_buddy.scheduler import start_scheduler


def _log_thread_exception(args: threading.ExceptHookArgs) -> None:
    name = args.thread.name if args.thread else "unknown"
    log_error(f"thread:{name}", args.exc_value)


def main() -> int:
    threading.excepthook = _log_thread_exception

    start_scheduler(get_context())
    port = int(os.getenv("PORT", "3000"))
    log(f"Bot running on {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
