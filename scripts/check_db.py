import time

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.db.models.user import User
from app.db.session import engine


def log(message: str) -> None:
    ts = time.strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def main() -> None:
    log(f"Connecting to {engine.url.render_as_string(hide_password=True)}")
    try:
        with engine.connect() as conn:
            user_count = conn.execute(select(func.count()).select_from(User)).scalar_one()
    except SQLAlchemyError as exc:
        log(f"Database connection failed: {exc}")
        raise SystemExit(1)
    finally:
        engine.dispose()

    log(f"Database connected. users={user_count}")


if __name__ == "__main__":
    main()
