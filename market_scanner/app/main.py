from __future__ import annotations

import argparse
import asyncio
import sys

from market_scanner.app.bootstrap import build_runtime
from market_scanner.core.config import load_config
from market_scanner.core.env import load_dotenv
from market_scanner.monitoring.logger import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="market-scanner")
    p.add_argument("mode", choices=["scan", "analyze"])
    p.add_argument("--config", required=True, help="Path to YAML config (e.g., configs/default.yaml)")
    p.add_argument("--symbol", help="Instrument for analyze mode (e.g., KRW-BTC)")
    return p


async def _amain(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.mode == "analyze" and not args.symbol:
        parser.error("analyze mode requires --symbol")

    load_dotenv(".env")
    cfg = load_config(args.config)
    setup_logging(cfg.logging.level)
    runtime = build_runtime(cfg)

    if args.mode == "analyze":
        report = await runtime.analyze(args.symbol)
        return 0 if report is not None else 1

    await runtime.run()
    return 0


def main() -> None:
    try:
        rc = asyncio.run(_amain(sys.argv[1:]))
    except KeyboardInterrupt:
        rc = 130
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
