"""
External scheduler for the status sweep.

Usage:
  - One tick:            python scripts/sweep_statuses.py
  - Every 15 seconds:    python scripts/sweep_statuses.py --interval 15
  - Another host:        python scripts/sweep_statuses.py --base-url http://reports.local:8000

Each tick calls POST /api/reports/sweep, which advances every open report by
one status. A failed tick is reported and the loop carries on.
"""

import argparse
import logging
import time

import requests

logger = logging.getLogger("sweep_statuses")

SWEEP_PATH = "/api/reports/sweep"


def sweep_once(base_url: str, timeout: float = 5.0) -> int:
    """Run one sweep tick and return how many reports changed."""
    resp = requests.post(f"{base_url.rstrip('/')}{SWEEP_PATH}", timeout=timeout)
    resp.raise_for_status()
    return int(resp.json().get("changed", 0))


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--interval", type=float, default=0, help="Seconds between ticks (0 = run once)")
    parser.add_argument("--timeout", type=float, default=5.0, help="HTTP timeout per tick")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    while True:
        try:
            changed = sweep_once(args.base_url, timeout=args.timeout)
            logger.info(f"Sweep advanced {changed} report(s)")
        except requests.RequestException as e:
            logger.error(f"Sweep request failed: {e}")
            if args.interval <= 0:
                raise SystemExit(1)

        if args.interval <= 0:
            break
        time.sleep(args.interval)


if __name__ == "__main__":
    main()
