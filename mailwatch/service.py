#!/usr/bin/env python3
"""Mail log monitor: tails the MTA log and reports delivery outcomes."""

import argparse
import logging
import queue
import signal
import sys

from mailwatch.channels import setup_logging
from mailwatch.config import load_config, load_yaml_config
from mailwatch.context import build_context
from mailwatch.cursor import LogCursor
from mailwatch.pipeline import MailLogPipeline
from mailwatch.watcher import LogChangeHandler, PollTicker, build_observer, drain

logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailwatch",
        description="Tail an MTA mail log and report delivery outcomes.",
    )
    parser.add_argument(
        "--log-file",
        help="Mail log to tail (default: $MAIL_LOG_PATH or /var/log/mail.log)",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for the results/errors logs (default: ./parsed_logs)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--interval", type=float,
        help="Polling interval in seconds (default: 1.0)",
    )
    parser.add_argument(
        "--no-clear", action="store_true",
        help="Do not clear the console before each report",
    )
    parser.add_argument(
        "--once", action="store_true",
        help="Process the existing file, print the report and exit",
    )
    return parser


def _save_snapshot(reporter, path: str) -> bool:
    """Write the JSON snapshot; a failure is logged and tailing continues."""
    try:
        reporter.write_snapshot(path)
    except OSError as e:
        logger.error("Failed to write snapshot %s: %s", path, e)
        return False
    return True


def main(argv=None) -> int:
    args = build_cli_parser().parse_args(argv)
    config = load_config(args, load_yaml_config(args.config))
    channels = setup_logging(config)

    try:
        cursor = LogCursor(config.log_path)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    ctx = build_context(config, channels)
    pipeline = MailLogPipeline(cursor, ctx)

    logger.info("Monitoring mail log: %s", cursor.path)
    logger.info("Showing the last %d outcomes", config.history_size)
    pipeline.load_backlog()
    _save_snapshot(ctx.reporter, config.snapshot_path)

    if args.once:
        return 0

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    triggers: queue.Queue = queue.Queue()
    handler = LogChangeHandler(cursor.path, triggers)
    observer = build_observer(handler, use_polling=config.use_polling)
    ticker = PollTicker(triggers, config.poll_interval)
    observer.start()
    ticker.start()

    while _running:
        try:
            triggers.get(timeout=0.5)
        except queue.Empty:
            continue
        drain(triggers)
        if pipeline.run_once():
            _save_snapshot(ctx.reporter, config.snapshot_path)

    logger.info("Shutting down...")
    ticker.stop()
    ticker.join(timeout=5)
    observer.stop()
    observer.join(timeout=5)
    _save_snapshot(ctx.reporter, config.snapshot_path)

    open_ids = ctx.store.open_ids
    logger.info(
        "Stopped after %d passes. Counters: %s, open messages: %d",
        pipeline.passes, ctx.counters.as_dict(), len(open_ids),
    )
    if open_ids:
        logger.debug("Open message ids: %s", ", ".join(open_ids))
    return 0


if __name__ == "__main__":
    sys.exit(main())
