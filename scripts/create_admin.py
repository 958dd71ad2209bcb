import argparse
import getpass
import time

from app.db.enums import Role
from app.db.session import SessionLocal
from app.errors import AppError, BadRequest
from app.services.auth import create_account


def log(message: str) -> None:
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Create a user account directly in the database (administrators by default)."
    )
    parser.add_argument("--name", required=True, help="Full name, 20-60 characters.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--address", default="", help="Postal address, up to 400 characters.")
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.ADMIN.value,
        help="Role for the new account.",
    )
    parser.add_argument(
        "--password",
        help="Password for the account. Prompted for when omitted.",
    )
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    db = SessionLocal()
    try:
        user = create_account(
            db,
            name=args.name,
            email=args.email,
            password=password,
            address=args.address,
            role=Role(args.role),
        )
    except BadRequest as exc:
        for error in exc.errors:
            log(f"FAIL {error['field']}: {error['message']}")
        raise SystemExit(1)
    except AppError as exc:
        log(f"FAIL {exc.message}")
        raise SystemExit(1)
    finally:
        db.close()

    log(f"Created {user.role} account id={user.id} email={user.email}")


if __name__ == "__main__":
    main()
