#!/usr/bin/env python3
"""
Provision a dealer for an identity-provider user.

Every tenant endpoint answers 404 "Dealer not found" until the caller's
identity user id has a dealers row. This script creates that row, or
updates name/email/role if it already exists.

Usage:
    DATABASE_URL='postgresql://...' python scripts/provision_dealer.py \\
        user_2abc... "Acme Motors" owner@acme.example
"""

import os
import sys
import argparse

import psycopg2

from dealerdesk.core.auth.repositories import DealerRepository


def main(argv=None):
    parser = argparse.ArgumentParser(description='Create or update a dealer row')
    parser.add_argument('identity_user_id', help='User id issued by the identity provider')
    parser.add_argument('name', help='Dealer display name')
    parser.add_argument('email', help='Dealer contact email')
    parser.add_argument('--role', default='dealer', help='Dealer role (default: dealer)')
    args = parser.parse_args(argv)

    if not os.environ.get('DATABASE_URL'):
        print("ERROR: DATABASE_URL environment variable not set")
        return 1

    try:
        dealer = DealerRepository().upsert(args.identity_user_id, args.name, args.email, role=args.role)
    except psycopg2.Error as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Dealer {dealer['id']} ready for identity {dealer['identity_user_id']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
