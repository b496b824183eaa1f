#!/usr/bin/env python
"""Database initialization script for the translator backend.

Creates the users and translations tables from the SQLAlchemy models.
Run this once before starting the application for the first time.

Usage:
    python init_db.py
"""

import os
import sys
from translator import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
        db.create_all()

        tables_info = [
            ("users", "User accounts and authentication"),
            ("translations", "Metadata-only translation history"),
        ]

        print("Created tables:")
        for table_name, description in tables_info:
            print(f"  - {table_name:<25} - {description}")

        if not app.config['TEXT_HASH_SALT']:
            print("\nWARNING: TEXT_HASH_SALT is not set; POST /api/translate will answer 500.")

        print(f"\n{'='*60}")
        print("Database initialization complete!")
        print(f"{'='*60}\n")
        print("Next steps:")
        print("  1. Start the Flask server: python wsgi.py")
        print("  2. Register: POST /api/auth/register")
        print("\n")

    return True


if __name__ == '__main__':
    sys.exit(0 if init_database() else 1)
