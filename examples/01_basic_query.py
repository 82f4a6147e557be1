"""
Example 01: Basic Statement Execution

This example demonstrates running queries, updates and callable blocks through
RowMapper's Executor and StatementHandler hooks.
"""

from row_mapper import ConnectionConfig, Executor, StatementHandler, positional
import tempfile
import sqlite3
from pathlib import Path


def main():
    # Create a temporary database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    # Set up the database with some test data
    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            active INTEGER DEFAULT 1
        )
    """)
    conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
    conn.execute("INSERT INTO users (name, email) VALUES ('Bob', 'bob@example.com')")
    conn.execute("INSERT INTO users (name, email, active) VALUES ('Charlie', 'charlie@example.com', 0)")
    conn.commit()
    conn.close()

    # Configure executor; every operation opens and closes its own connection
    config = ConnectionConfig(driver="sqlite", database=db_path)
    executor = Executor.from_config(config)

    print("=== Basic Statement Execution ===\n")

    # query: rows are handed to the result hook, then released
    def print_users(rows):
        for row in rows:
            print(f"  - {row.get('name')} ({row.get('email')})")

    print("Active users:")
    executor.query(
        "SELECT name, email FROM users WHERE active = ?",
        StatementHandler(bind=positional(1), result=print_users),
    )
    print()

    # execute: returns the affected row count and commits on success
    affected = executor.execute(
        "UPDATE users SET active = ? WHERE name = ?",
        StatementHandler(bind=positional(1, "Charlie")),
    )
    print(f"execute result: {affected} row(s) updated\n")

    # call: a callable block, with a function installed by the before hook
    def install(connection):
        connection.create_function("shout", 1, lambda text: text.upper())

    def print_outputs(statement):
        for row in statement.result_rows():
            print(f"call result: {row.get('loud')}")

    executor.call(
        "SELECT shout(name) AS loud FROM users WHERE id = ?",
        StatementHandler(before=install, bind=positional(1), call_result=print_outputs),
    )

    # Clean up
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
