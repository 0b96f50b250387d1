"""SQLite export of people, relationships and computed layout."""

from pathlib import Path
import sqlite3

from models import Layout, Person, Relationship
from store import RecordStore


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create SQLite database with person, relationship and layout tables."""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS person (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            role TEXT,
            gender TEXT,
            father_id INTEGER NOT NULL DEFAULT 0,
            mother_id INTEGER NOT NULL DEFAULT 0
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS relationship (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            person1_id INTEGER NOT NULL,
            person2_id INTEGER NOT NULL,
            relationship_type TEXT NOT NULL,
            former INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (person1_id) REFERENCES person(id),
            FOREIGN KEY (person2_id) REFERENCES person(id)
        )
    """)

    # x/y are NULL for hidden people
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS layout (
            person_id INTEGER PRIMARY KEY,
            generation INTEGER NOT NULL,
            owner_id INTEGER,
            x INTEGER,
            y INTEGER,
            FOREIGN KEY (person_id) REFERENCES person(id)
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS canvas (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            width INTEGER NOT NULL,
            height INTEGER NOT NULL
        )
    """)

    conn.commit()
    return conn


def store_data(conn: sqlite3.Connection, persons: list[Person], relationships: list[Relationship]):
    """Insert persons and relationships into the database."""
    cursor = conn.cursor()

    # Insert persons
    cursor.executemany(
        """
        INSERT OR REPLACE INTO person
        (id, name, role, gender, father_id, mother_id)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [(p.id, p.name, p.role, p.gender, p.father_id, p.mother_id) for p in persons],
    )

    # Insert relationships
    cursor.executemany(
        """
        INSERT INTO relationship (person1_id, person2_id, relationship_type, former)
        VALUES (?, ?, ?, ?)
        """,
        [(r.person1_id, r.person2_id, r.relationship_type, int(r.former)) for r in relationships],
    )

    conn.commit()


def store_layout(conn: sqlite3.Connection, store: RecordStore, layout: Layout):
    """
    Replace the stored layout with `layout` in a single transaction.

    Readers never see rows from two different layout passes.
    """
    rows = []
    for p in store:
        pos = layout.position(p.id)
        x, y = pos if pos is not None else (None, None)
        rows.append((p.id, layout.generation(p.id), layout.owners.get(p.id), x, y))

    with conn:
        conn.execute("DELETE FROM layout")
        conn.executemany(
            "INSERT INTO layout (person_id, generation, owner_id, x, y) VALUES (?, ?, ?, ?, ?)",
            rows,
        )
        conn.execute(
            "INSERT OR REPLACE INTO canvas (id, width, height) VALUES (1, ?, ?)",
            (layout.width, layout.height),
        )


def export_database(db_path: Path, store: RecordStore, layout: Layout):
    """Write a fresh database file with the people, their relationships and the layout."""
    if db_path.exists():
        db_path.unlink()

    conn = create_database(db_path)
    try:
        store_data(conn, store.people, store.relationships())
        store_layout(conn, store, layout)
    finally:
        conn.close()
