"""
Database initialization script.
Creates all tables and prints the early-bird status.
"""
import asyncio
import sys
sys.path.insert(0, '.')

from database import init_db, close_db
from waitlist.services import SignupService


async def main():
    print("Initializing database...")

    # Create tables
    await init_db()
    print("Tables created successfully!")

    status = await SignupService().early_bird_status()
    print(f"Early-bird spots: {status['taken']}/{status['total']} taken")

    await close_db()
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
