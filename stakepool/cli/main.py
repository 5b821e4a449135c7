# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import json
import os
import sys

import requests

from ..protocol.config.params import DENOM

DEFAULT_NODE = "http://localhost:3001"

def get_node_url(args):
    return args.node or os.environ.get("STAKEPOOL_NODE", DEFAULT_NODE)

def _get(args, path):
    url = get_node_url(args)
    try:
        resp = requests.get(f"{url}{path}")
    except requests.RequestException as e:
        print(f"Connection error: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    return resp.json()

def _post(args, path, payload):
    url = get_node_url(args)
    try:
        resp = requests.post(f"{url}{path}", json=payload)
    except requests.RequestException as e:
        print(f"Connection error: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        print(f"Error: {detail}")
        sys.exit(1)
    return resp.json()

# --- Query Commands ---
def cmd_user(args):
    data = _get(args, f"/api/user/{args.wallet}")
    print(f"Staked:    {data['staked_amount']} {DENOM}")
    print(f"Earned:    {data['total_earned']} {DENOM}")
    print(f"Claimable: {data['claimable_rewards']} {DENOM}")
    print(f"VIP level: {data['vip_level']}")
    print(f"Status:    {data['status']}")

def cmd_txs(args):
    txs = _get(args, f"/api/user/{args.wallet}/transactions")
    if not txs:
        print("No transactions found.")
        return

    print(f"{'ID':<6} {'Date':<12} {'Type':<10} {'Amount':>16} {'Status'}")
    print("-" * 60)
    for tx in txs:
        print(f"{tx['id']:<6} {tx['date']:<12} {tx['tx_type']:<10} {tx['amount']:>16} {tx['status']}")

def cmd_settings(args):
    print(json.dumps(_get(args, "/api/settings"), indent=2))

# --- Tx Commands ---
def cmd_stake(args, kind="stake"):
    data = _post(args, "/api/stake", {"wallet_address": args.wallet, "amount": args.amount, "type": kind})
    print(f"{kind.capitalize()} of {args.amount} {DENOM} completed.")
    print(f"Staked amount: {data['staked_amount']} {DENOM}")

def cmd_unstake(args):
    cmd_stake(args, kind="unstake")

def cmd_claim(args):
    data = _post(args, "/api/claim", {"wallet_address": args.wallet})
    print(f"Claimed {data['amount']} {DENOM}")

def cmd_withdraw(args):
    data = _post(args, "/api/withdraw/request", {"wallet_address": args.wallet, "amount": args.amount})
    w = data["withdrawal"]
    print(f"Withdrawal #{w['id']} requested: {w['amount']} {DENOM}")
    print(f"Fee: {w['fee']} {DENOM}, you receive {w['net_amount']} {DENOM} once approved.")

def main():
    parser = argparse.ArgumentParser(prog="stakepool-cli", description="StakePool Client CLI")
    parser.add_argument("--node", help=f"Node URL (default: {DEFAULT_NODE})")

    subparsers = parser.add_subparsers(dest="command", help="Sub-commands")

    p_user = subparsers.add_parser("user", help="Show staking balances for a wallet")
    p_user.add_argument("wallet", help="Wallet address")

    p_txs = subparsers.add_parser("txs", help="List wallet transactions, newest first")
    p_txs.add_argument("wallet", help="Wallet address")

    subparsers.add_parser("settings", help="Show public platform settings")

    p_stake = subparsers.add_parser("stake", help="Stake funds")
    p_stake.add_argument("wallet", help="Wallet address")
    p_stake.add_argument("amount", help=f"Amount in {DENOM}")

    p_unstake = subparsers.add_parser("unstake", help="Unstake funds")
    p_unstake.add_argument("wallet", help="Wallet address")
    p_unstake.add_argument("amount", help=f"Amount in {DENOM}")

    p_claim = subparsers.add_parser("claim", help="Claim accrued rewards")
    p_claim.add_argument("wallet", help="Wallet address")

    p_withdraw = subparsers.add_parser("withdraw", help="Request a withdrawal of claimable rewards")
    p_withdraw.add_argument("wallet", help="Wallet address")
    p_withdraw.add_argument("amount", help=f"Amount in {DENOM}")

    args = parser.parse_args()

    if args.command == "user": cmd_user(args)
    elif args.command == "txs": cmd_txs(args)
    elif args.command == "settings": cmd_settings(args)
    elif args.command == "stake": cmd_stake(args)
    elif args.command == "unstake": cmd_unstake(args)
    elif args.command == "claim": cmd_claim(args)
    elif args.command == "withdraw": cmd_withdraw(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
