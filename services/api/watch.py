"""
Watch a running dashboard and log whenever the sheet changes.

Usage:
    python watch.py --url http://localhost:3000 --interval 30
"""
import argparse
import asyncio
import logging
import signal

from core.poller import DashboardPoller

logger = logging.getLogger("watch")


def _on_change(payload: dict) -> None:
    rows = payload.get("data") or []
    logger.info(f"Sheet changed: {len(rows)} rows at {payload.get('timestamp')}")


async def _main(url: str, interval: float) -> None:
    poller = DashboardPoller(url, interval=interval, on_change=_on_change)
    stop = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    poller.start()
    logger.info(f"Watching {url}/api/data every {interval}s (Ctrl+C to stop)")
    try:
        await stop.wait()
    finally:
        await poller.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--url", default="http://localhost:3000")
    parser.add_argument("--interval", type=float, default=30.0)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    asyncio.run(_main(args.url.rstrip("/"), args.interval))


if __name__ == "__main__":
    main()
