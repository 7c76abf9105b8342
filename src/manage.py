"""SoleStore management CLI.

Usage:
    python src/manage.py setup-db       # Create all tables
    python src/manage.py drop-db        # Drop all tables
    python src/manage.py create-admin --email admin@example.com --username admin \
        --password 'Str0ngPass' --phone '555-000-1111'
"""

import argparse
import sys


def _domain():
    from solestore.domain import shop

    shop.init()
    return shop


def setup_database():
    from solestore.utils.db import setup_db

    print("Creating solestore database schema...")
    if setup_db(_domain()):
        print("  schema ready.")
    else:
        print("  no SQL provider configured (set PROTEAN_ENV=sqlite or production); nothing to do.")
    print("Done.")


def drop_database():
    from solestore.utils.db import drop_db

    print("Dropping solestore database schema...")
    if drop_db(_domain()):
        print("  schema dropped.")
    else:
        print("  no SQL provider configured; nothing to do.")
    print("Done.")


def create_admin(email, username, password, phone):
    """Register an administrator account, or report an existing one."""
    from protean.utils.globals import current_domain

    from solestore.identity.user.queries import find_by_email
    from solestore.identity.user.registration import RegisterUser
    from solestore.identity.user.user import Role, User
    from solestore.settings import get_settings

    shop = _domain()
    with shop.domain_context():
        if find_by_email(email) is not None:
            print(f"User {email} already exists; left unchanged.")
            return 0

        user_id = current_domain.process(
            RegisterUser(
                username=username,
                email=email,
                password=password,
                phone_number=phone,
                street="N/A",
                city="N/A",
                state="N/A",
                postal_code="00000",
                country="N/A",
                password_hash_iterations=get_settings().password_hash_iterations,
            ),
            asynchronous=False,
        )
        repo = current_domain.repository_for(User)
        user = repo.get(user_id)
        user.change_role(Role.ADMIN.value)
        repo.add(user)

    print(f"Administrator {email} created ({user_id}).")
    return 0


def main():
    parser = argparse.ArgumentParser(description="SoleStore management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--phone", default="000-000-0000")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "create-admin":
        sys.exit(create_admin(args.email, args.username, args.password, args.phone))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
