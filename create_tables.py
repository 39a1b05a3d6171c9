#!/usr/bin/env python3
"""
Create the database tables the health prediction service reads from.
This script creates tables without dropping existing ones.
"""

from app.database import Base, engine
from app.models import Patient

print("Creating database tables...")
print("Models to create:")
print(f"- {Patient.__tablename__}")
print()

try:
    Base.metadata.create_all(bind=engine)
    print("✅ Database tables created successfully!")
    print()
    print("The following tables are now available:")
    for table_name in Base.metadata.tables.keys():
        print(f"  - {table_name}")
except Exception as e:
    print(f"❌ Error creating tables: {e}")
    raise
