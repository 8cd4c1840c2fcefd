"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PHONE PASSWORD [role]
Example:
  python -m app.scripts.create_user "Ana Lima" ana@example.com "(11) 91234-5678" S3curePass admin
"""
import argparse
import sys

from app.core.config import get_settings
from app.core.database import Database
from app.core.security import hash_password
from app.models.user import ROLE_ADMIN, ROLE_USER
from app.services.users import DuplicateEmailError, StoreUnavailableError, UserStore
from app.services.validation import validate_registration


def main(argv: list[str] | None = None, database: Database | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an OrçamentosOnline user.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email (unique, case-insensitive)")
    parser.add_argument("phone", help="Mobile phone as (XX) 9XXXX-XXXX")
    parser.add_argument("password", help="Password (8+ chars with upper, lower and a digit)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=[ROLE_USER, ROLE_ADMIN])
    args = parser.parse_args(argv)

    errors = validate_registration(args.name, args.email, args.phone, args.password)
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        return 1

    settings = get_settings()
    owns_database = database is None
    if database is None:
        database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        store = UserStore(db)
        try:
            user = store.insert(
                args.name,
                args.email,
                args.phone,
                hash_password(args.password, settings.BCRYPT_ROUNDS),
                role=args.role,
            )
        except DuplicateEmailError:
            print(f"User '{args.email}' already exists.", file=sys.stderr)
            return 1
        except StoreUnavailableError as e:
            print(f"Database error: {e.message}", file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' with role '{user.role}'.")
        return 0
    finally:
        db.close()
        if owns_database:
            database.dispose()


if __name__ == "__main__":
    sys.exit(main())
