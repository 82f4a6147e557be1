"""
Example 02: Entity Mapping

This example demonstrates mapping query results to declared dataclasses and
Pydantic models, and rendering them as JSON text.
"""

from row_mapper import ConnectionConfig, Executor, ResultSetMapper, column, entity, positional
from dataclasses import dataclass
from pydantic import BaseModel, Field
import tempfile
import sqlite3
from pathlib import Path


@entity
@dataclass
class UserDataclass:
    """User entity using dataclass"""
    id: int = column("ID", default=0)
    name: str = column("NAME", default="")
    email: str = column("EMAIL", default="")
    active: bool = column("ACTIVE", default=False)


@entity
class UserPydantic(BaseModel):
    """User entity using Pydantic"""
    id: int = Field(0, json_schema_extra={"column": "ID"})
    name: str = Field("", json_schema_extra={"column": "NAME"})
    email: str = Field("", json_schema_extra={"column": "EMAIL"})


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

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
    conn.commit()
    conn.close()

    # Configure executor
    config = ConnectionConfig(driver="sqlite", database=db_path)
    executor = Executor.from_config(config)

    print("=== Entity Mapping ===\n")

    # Map to dataclass
    print("1. Dataclass Mapping:")
    dataclass_mapper = ResultSetMapper(UserDataclass, executor)
    users = dataclass_mapper.fetch("SELECT * FROM users WHERE id = ?", positional(1))
    user = users[0]
    print(f"   Type: {type(user).__name__}")
    print(f"   Data: {user}")
    print(f"   Access: user.name = {user.name}\n")

    # Map to Pydantic model
    print("2. Pydantic Model Mapping:")
    pydantic_mapper = ResultSetMapper(UserPydantic, executor)
    users = pydantic_mapper.fetch("SELECT * FROM users")
    print(f"   Count: {len(users)} users")
    for u in users:
        print(f"   - {u.name}: {u.email}")
    print()

    # Render as JSON text
    print("3. JSON Output:")
    print(f"   Single: {dataclass_mapper.fetch_as_text('SELECT * FROM users', single_result=True)}")
    print(f"   List:   {pydantic_mapper.fetch_as_text('SELECT * FROM users')}")
    print(f"   Empty:  {pydantic_mapper.fetch_as_text('SELECT * FROM users WHERE id < 0')}\n")

    # Clean up
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
