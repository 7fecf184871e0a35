from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from . import __version__
from .catalog import load_catalog
from .catalog.loader import catalog_summary
from .config import load_engine_config
from .logging_config import configure_logging
from .loop import GameLoop, LoopConfig
from .persistence import SnapshotStore
from .session import GameSession
from .storefront import BuyMode, quote, visible_producers, visible_upgrades
from .summary import summarize

logger = logging.getLogger(__name__)

# Upper bound on purchases the autoplayer makes per simulated second.
MAX_PURCHASES_PER_STEP = 50


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="banana-idle",
        description="Banana Idle - headless idle clicker progression engine",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    parser.add_argument("--catalog", type=Path, default=None, help="Catalog YAML (defaults to the bundled one).")
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML overriding balance defaults.")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory holding the save (platform default if omitted).")

    sub = parser.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Advance a game on a virtual clock with a simple autoplayer.")
    sim.add_argument("--seconds", type=float, default=600.0, help="Simulated seconds to run.")
    sim.add_argument("--clicks-per-second", type=int, default=5, help="Manual clicks per simulated second.")
    sim.add_argument("--auto-rebirth", action="store_true", help="Buy the capstone and rebirth when affordable.")
    sim.add_argument("--no-save", action="store_true", help="Do not read or write the save file.")

    run = sub.add_parser("run", help="Run the real-time loop headless for a while, autosaving.")
    run.add_argument("--seconds", type=float, default=30.0, help="Wall-clock seconds to run.")

    sub.add_parser("show", help="Print a summary of the saved game.")
    sub.add_parser("catalog", help="List producers, upgrades and achievements.")
    sub.add_parser("reset", help="Delete the saved game.")
    return parser.parse_args(argv)


def autoplay_step(session: GameSession, clicks: int, auto_rebirth: bool) -> None:
    """One simulated second of a naive player: click, buy upgrades, buy the cheapest producer."""
    for _ in range(clicks):
        session.perform_click()

    state = session.state
    if auto_rebirth:
        capstone = session.catalog.capstone
        if quote(capstone, state, BuyMode.ONE, session.config).affordable:
            session.purchase_producer(capstone.id)
            session.rebirth()
            return

    for upgrade in visible_upgrades(session.catalog, state):
        session.purchase_upgrade(upgrade.id)

    for _ in range(MAX_PURCHASES_PER_STEP):
        offers = [
            quote(p, state, BuyMode.ONE, session.config)
            for p in visible_producers(session.catalog, state.run.prestige_level)
            if not p.capstone
        ]
        affordable = [q for q in offers if q.affordable]
        if not affordable:
            break
        cheapest = min(affordable, key=lambda q: q.cost)
        if session.purchase_producer(cheapest.producer_id, cheapest.quantity) is None:
            break


def simulate(session: GameSession, seconds: float, clicks: int, auto_rebirth: bool) -> None:
    whole = int(seconds)
    for _ in range(whole):
        autoplay_step(session, clicks, auto_rebirth)
        session.scheduler.advance(1.0)
    remainder = seconds - whole
    if remainder > 0:
        session.scheduler.advance(remainder)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.WARNING)

    catalog = load_catalog(args.catalog)
    config = load_engine_config(args.config)
    store: Optional[SnapshotStore] = SnapshotStore(args.save_dir)

    if args.command == "catalog":
        for line in catalog_summary(catalog):
            print(line)
        return 0

    if args.command == "reset":
        store.clear()
        print(f"Deleted save in {store.save_dir}")
        return 0

    if args.command == "simulate" and args.no_save:
        store = None

    with GameSession.start(catalog, config, store) as session:
        if args.command == "simulate":
            simulate(session, args.seconds, args.clicks_per_second, args.auto_rebirth)
            session.save("manual")
        elif args.command == "run":
            steps = max(1, int(args.seconds * config.tick_rate))
            GameLoop(session.scheduler, LoopConfig(tick_rate=config.tick_rate, max_steps=steps)).run()
            session.save("manual")
        # Print JSON summary so it can be diffed across runs
        print(json.dumps(summarize(session).to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
