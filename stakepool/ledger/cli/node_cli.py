# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import asyncio
import logging
import os

from uvicorn import Config, Server

from ...protocol.config.params import CURRENT_DEPLOYMENT
from ..core.ledger import Ledger
from ..jobs.accrual import AccrualJob
from ..rpc import api  # import module to set globals
from ..rpc.auth import AdminSessions

logger = logging.getLogger(__name__)


def cmd_init(args):
    """Initialize the data dir and write an empty first snapshot."""
    data_dir = args.datadir
    os.makedirs(data_dir, exist_ok=True)

    ledger = Ledger.open(data_dir)
    if ledger.snapshot_manager.get_latest_sequence() is not None:
        print(f"Ledger already initialized in {data_dir}")
        return

    ledger.persist()
    print(f"Ledger initialized in {data_dir}")
    print(f"Deployment: {CURRENT_DEPLOYMENT.deployment_id}")


def cmd_accrue(args):
    """Run a single accrual tick and exit."""
    ledger = Ledger.open(args.datadir)
    report = ledger.run_accrual_tick()
    print(f"Credited {report.total_credited} to {report.users_credited} users")


async def run_node_async(args):
    data_dir = args.datadir
    os.makedirs(data_dir, exist_ok=True)

    print("Starting StakePool ledger node...")
    print(f"Data dir: {data_dir}")
    print(f"RPC: {args.host}:{args.port}")

    # 1. Initialize Core Components
    ledger = Ledger.open(data_dir)

    # Inject into RPC module (global vars)
    api.ledger = ledger
    api.sessions = AdminSessions(CURRENT_DEPLOYMENT.admin_username, CURRENT_DEPLOYMENT.admin_password)

    # 2. Start Services
    job = None
    if not args.no_accrual:
        job = AccrualJob(ledger)
        job.start()
    else:
        logger.warning("Accrual job disabled. Rewards will not accumulate.")

    config = Config(app=api.app, host=args.host, port=args.port, log_level="info")
    server = Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        pass
    finally:
        if job:
            job.stop()
        ledger.persist()
        logger.info("Ledger node stopped")


def cmd_run(args):
    """Wrapper to run async main."""
    try:
        asyncio.run(run_node_async(args))
    except KeyboardInterrupt:
        pass


def main():
    parser = argparse.ArgumentParser(description="StakePool Ledger Node CLI")
    parser.add_argument("--datadir", default="./.stakepool", help="Data directory")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init command
    subparsers.add_parser("init", help="Initialize ledger data directory")

    # Run command
    run_parser = subparsers.add_parser("run", help="Run the ledger node")
    run_parser.add_argument("--host", default="0.0.0.0", help="RPC Host")
    run_parser.add_argument("--port", type=int, default=CURRENT_DEPLOYMENT.default_port, help="RPC Port")
    run_parser.add_argument("--no-accrual", action="store_true", help="Do not start the reward accrual job")

    # Accrue command
    subparsers.add_parser("accrue", help="Run one reward accrual tick")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.command == "init":
        cmd_init(args)
    elif args.command == "run":
        cmd_run(args)
    elif args.command == "accrue":
        cmd_accrue(args)


if __name__ == "__main__":
    main()
