#!/usr/bin/env python3
"""VulnShop Command Line Interface.

Usage:
    vulnshop serve users --port 8081
    vulnshop query "SELECT * FROM users" --seed backend/vulnshop/seeds/users.sql
    vulnshop hash password123
    vulnshop show-config
    vulnshop demo
"""
import argparse
import json
import sys

import httpx
from dotenv import load_dotenv

from .core.config import SEEDS_DIR, load_config
from .core.database import Database, DatabaseError, hash_password


def cmd_serve(args):
    """Run one service."""
    from .main import run

    run(args.service, args.port)
    return 0


def cmd_query(args):
    """Run SQL against a fresh store, optionally seeded first."""
    settings = load_config(args.config)
    try:
        with Database(settings) as db:
            for seed_file in args.seed or []:
                db.seed_from_file(seed_file)
            rows = db.execute_query(args.sql)
    except DatabaseError as e:
        print(f"❌ Query failed: {e}")
        return 1

    print(json.dumps(rows, indent=2))
    return 0


def cmd_hash(args):
    """Print the tagged hash of a password."""
    print(hash_password(args.password))
    return 0


def cmd_show_config(args):
    """Show current configuration, secrets included."""
    settings = load_config(args.config)
    print("Current configuration:")
    for key, value in settings.model_dump().items():
        print(f"  {key}: {value}")
    print(f"  connection string: {settings.connection_string}")
    return 0


def _in_process_transport(clients):
    """Route outbound requests by port to in-process test clients."""

    def handler(request: httpx.Request) -> httpx.Response:
        client = clients[request.url.port]
        response = client.request(request.method, request.url.raw_path.decode(), content=request.content)
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    return httpx.MockTransport(handler)


def cmd_demo(args):
    """Create a user, a product and an order, then print the stored orders."""
    from fastapi.testclient import TestClient

    from .main import create_app
    from .services import SnapshotClient

    settings = load_config(args.config).model_copy(update={"DB_AUTO_SEED": "0"})
    users_app = create_app("users", settings)
    products_app = create_app("products", settings)
    orders_app = create_app("orders", settings)

    with TestClient(users_app) as users, TestClient(products_app) as products, \
            TestClient(orders_app) as orders:
        orders_app.state.snapshots = SnapshotClient(
            "http://localhost:8081",
            "http://localhost:8082",
            transport=_in_process_transport({8081: users, 8082: products}),
        )

        users.post("/users", json={
            "username": "alice", "email": "alice@example.com", "password": "password123",
        })
        products.post("/products", json={
            "name": "Demo Product", "description": "Demo", "price": 9.99, "category": "Demo",
        })
        orders.post("/orders", json={
            "user_id": 1, "product_id": 1, "quantity": 2, "total_price": 19.98,
        })

        stored = orders.get("/orders").json()

    print("Stored orders:")
    print(json.dumps(stored, indent=2))
    return 0


def main(argv=None):
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="VulnShop - Insecure Microservices Demo CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  vulnshop serve gateway
  vulnshop query "SELECT * FROM users" --seed {SEEDS_DIR / 'users.sql'}
  vulnshop hash password123
  vulnshop demo
        """
    )
    parser.add_argument('--config', '-c', help='JSON or YAML config file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    serve_parser = subparsers.add_parser('serve', help='Run a service')
    serve_parser.add_argument('service', choices=['users', 'products', 'orders', 'gateway'])
    serve_parser.add_argument('--port', '-p', type=int, help='Listen port (default: PORT or service default)')

    query_parser = subparsers.add_parser('query', help='Execute SQL against a fresh store')
    query_parser.add_argument('sql', help='SQL statement')
    query_parser.add_argument('--seed', '-s', action='append', help='Seed file to run first (repeatable)')

    hash_parser = subparsers.add_parser('hash', help='Hash a password')
    hash_parser.add_argument('password')

    subparsers.add_parser('show-config', help='Show current configuration')
    subparsers.add_parser('demo', help='Run the in-process order snapshot demo')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        'serve': cmd_serve,
        'query': cmd_query,
        'hash': cmd_hash,
        'show-config': cmd_show_config,
        'demo': cmd_demo,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
