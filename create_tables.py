"""
Simple script to create the users and conversations tables.
Run this once to set up the tables in your database.

Usage: python create_tables.py
"""

from sqlalchemy import inspect
from models import Base, User, Conversation  # Import models to register them
from database import engine

if __name__ == "__main__":
    print(f"Creating database tables on {engine.url.render_as_string(hide_password=True)}...")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    # Verify tables were created
    tables = set(inspect(engine).get_table_names())
    for table in (User.__tablename__, Conversation.__tablename__):
        print(f"{'✓' if table in tables else '✗'} {table} table")
