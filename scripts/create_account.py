#!/usr/bin/env python3
"""
Create an identity-store account and print an access token for it.

Accounts are normally provisioned by the identity service; this script seeds
them for local development and for the first super admin.

Usage:
  python scripts/create_account.py --email admin@example.com --name "Super Admin" \
      --role super_admin
  python scripts/create_account.py --email farmer@example.com --name "Farmer" \
      --role farmer --region Karnataka --district Mysuru --pin-code 570001
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.application.errors import ConflictError
from src.config.settings import get_settings
from src.domain.models.account import Account
from src.domain.value_objects.role import Role
from src.infrastructure.auth.jwt_service import JWTService
from src.infrastructure.db.session import (
    SQLAlchemyUnitOfWork,
    create_engine,
    create_session_factory,
)


async def create_account(args: argparse.Namespace) -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    role = Role(args.role)
    if role.is_region_scoped and not args.region:
        print("Region-scoped admins need --region")
        sys.exit(1)

    try:
        uow = SQLAlchemyUnitOfWork(session_factory)
        async with uow:
            account = await uow.accounts.get_by_email(args.email)
            if account:
                print(f"Account {args.email} already exists (ID: {account.id})")
            else:
                account = Account.create(
                    full_name=args.name,
                    email=args.email,
                    role=role,
                    region=args.region,
                    district=args.district,
                    pin_code=args.pin_code,
                )
                await uow.accounts.add(account)
                await uow.commit()
                print("Account created")
                print(f"   ID: {account.id}")
                print(f"   Role: {account.role.value}")
                if account.region:
                    print(f"   Region: {account.region}")
    except ConflictError as exc:
        print(f"Error creating account: {exc.message}")
        sys.exit(1)
    finally:
        await engine.dispose()

    jwt_service = JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        access_token_expires_minutes=settings.jwt_access_token_expires_minutes,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )
    token = jwt_service.create_access_token(
        subject=account.id, expires_minutes=args.token_minutes
    )
    print("\nAccess token:")
    print(f"   {token}")


def main():
    parser = argparse.ArgumentParser(description="Create an identity-store account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True, help="Full name")
    parser.add_argument("--role", required=True, choices=[r.value for r in Role])
    parser.add_argument("--region", help="State (farmer address or admin assignment)")
    parser.add_argument("--district")
    parser.add_argument("--pin-code", dest="pin_code")
    parser.add_argument(
        "--token-minutes", type=int, default=None, help="Override access token lifetime"
    )
    args = parser.parse_args()
    asyncio.run(create_account(args))


if __name__ == "__main__":
    main()
