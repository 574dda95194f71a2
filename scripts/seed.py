from pathlib import Path

from app.core.logging_config import setup_logging
from app.db.session import engine, Session, init_db
from app.db.seed import seed_all

SEED_PATH = Path(__file__).resolve().parent.parent / "app" / "db" / "seed_data.yaml"


def run_seed() -> None:
    setup_logging()
    init_db()
    with Session(engine) as session:
        counts = seed_all(session=session, seed_path=SEED_PATH)
    print(f"✅ Seed OK : {counts['users']} user(s), {counts['products']} produit(s) créés")


if __name__ == "__main__":
    run_seed()
