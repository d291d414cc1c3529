import sys

from dotenv import load_dotenv
from sqlalchemy import create_engine, text

from standards_hub.config import get_settings

# Force reload of .env
load_dotenv(override=True)

TABLES = (
    "base_standards",
    "state_standard_overrides",
    "district_standards",
    "school_standard_overrides",
)


def verify_connection():
    db_url = get_settings().database_url
    print(f"🔄 Connecting to: {db_url.split('@')[-1]}")  # Print only host for privacy

    try:
        engine = create_engine(db_url)
        with engine.connect() as conn:
            # 1. Basic Connection Test
            conn.execute(text("SELECT 1"))
            print("✅ Connection Successful!")

            # 2. Schema Check
            for table in TABLES:
                count = conn.execute(text(f"SELECT count(*) FROM {table}")).scalar()
                print(f"✅ {table}: {count} rows.")

    except Exception as e:
        print(f"\n❌ CONNECTION FAILED: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    verify_connection()
