from app.core.config import jwt_settings
from app.db.session import engine, Session, init_db

from app.db.seed import seed_all


def run_seed(seed_path: str = "app/db/seed_data.yaml"):
    init_db()
    with Session(engine) as session:
        for user, token in seed_all(session, seed_path=seed_path, jwt_settings=jwt_settings):
            print(f"{user.role.value:<5} {user.name or user.id}: {token}")


if __name__ == "__main__":
    run_seed()
