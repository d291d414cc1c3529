import argparse
import logging
import sys

from dotenv import load_dotenv

from standards_hub.config import get_settings
from standards_hub.store.catalog import iter_catalog
from standards_hub.store.sql import SQLStandardStore

load_dotenv(override=True)


def seed(database_url: str) -> int:
    store = SQLStandardStore(database_url)
    store.init_db()
    return store.seed_base(iter_catalog())


def main():
    parser = argparse.ArgumentParser(description="Seed the standards store with the national and state catalog")
    parser.add_argument("--database-url", default=None, help="Overrides STANDARDS_DATABASE_URL")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    db_url = args.database_url or get_settings().database_url
    print(f"🔄 Seeding: {db_url.split('@')[-1]}")  # Print only host for privacy

    try:
        count = seed(db_url)
    except Exception as e:
        print(f"\n❌ SEED FAILED: {str(e)}")
        sys.exit(1)

    print(f"✅ Seeded {count} base standards.")


if __name__ == "__main__":
    main()
