#!/usr/bin/env python3
"""Create the annotation database and table"""

import sys
from pathlib import Path
from typing import List
import pymysql
from dotenv import load_dotenv

# Load .env
load_dotenv()

# Add the project root to sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.database_config import DatabaseConfig
from storage.annotation_store import AnnotationStore


def read_table_statements(file_path: Path) -> List[str]:
    """
    Split schema.sql into statements, dropping comment lines

    CREATE DATABASE / USE are skipped; the database name comes from DatabaseConfig.
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        sql_content = f.read()

    statements = []
    for s in sql_content.split(';'):
        lines = [line.strip() for line in s.split('\n') if line.strip() and not line.strip().startswith('--')]
        if not lines:
            continue
        statement = ' '.join(lines)
        if statement.upper().startswith(('CREATE DATABASE', 'USE ')):
            continue
        statements.append(statement)
    return statements


def connect_server():
    """Connect without selecting a database"""
    return pymysql.connect(
        host=DatabaseConfig.HOST,
        port=DatabaseConfig.PORT,
        user=DatabaseConfig.USER,
        password=DatabaseConfig.PASSWORD,
        connect_timeout=DatabaseConfig.CONNECT_TIMEOUT,
        charset='utf8mb4'
    )


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Initialize the annotation database')
    parser.add_argument('--drop-first', action='store_true',
                        help='drop the database before creating it (deletes all annotations)')
    args = parser.parse_args()

    database_name = DatabaseConfig.DATABASE
    schema_file = project_root / 'storage' / 'schema.sql'
    if not schema_file.exists():
        print(f"Error: schema file not found: {schema_file}")
        sys.exit(1)

    print(f"Initializing database '{database_name}' on {DatabaseConfig.HOST}:{DatabaseConfig.PORT}...")

    try:
        conn = connect_server()
        with conn.cursor() as cursor:
            if args.drop_first:
                cursor.execute(f"DROP DATABASE IF EXISTS `{database_name}`")
                print(f"  dropped database '{database_name}'")
            cursor.execute(
                f"CREATE DATABASE IF NOT EXISTS `{database_name}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
            conn.select_db(database_name)
            for statement in read_table_statements(schema_file):
                cursor.execute(statement)
        conn.commit()
        conn.close()
        print("  database and tables created")
    except pymysql.MySQLError as e:
        print(f"  failed to create database: {e}")
        sys.exit(1)

    # Verify through the service client
    try:
        with AnnotationStore() as store:
            count = len(store.list_documents())
        print(f"  verified: {count} stored document(s)")
    except Exception as e:
        print(f"  verification failed: {e}")
        sys.exit(1)

    print("\nDatabase initialization complete")


if __name__ == '__main__':
    main()
