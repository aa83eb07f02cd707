"""Sequence management for object ID generation.

Each object type gets its own integer sequence starting at 1, kept in a
``_sequences`` system table. Dialect-neutral via SQLAlchemy Core.
"""

from sqlalchemy import Engine, text


class SequenceService:
    """Manages per-type sequences for integer IDs."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._ensure_table()

    def _ensure_table(self) -> None:
        """Create the sequences table if it doesn't exist."""
        with self._engine.connect() as conn:
            conn.execute(text("""
                CREATE TABLE IF NOT EXISTS _sequences (
                    obj_type TEXT NOT NULL PRIMARY KEY,
                    next_value INTEGER NOT NULL DEFAULT 1
                )
            """))
            conn.commit()

    def next_id(self, obj_type: str) -> int:
        """Return the next ID for an object type and advance its sequence."""
        with self._engine.begin() as conn:
            row = conn.execute(
                text("SELECT next_value FROM _sequences WHERE obj_type = :obj_type"),
                {"obj_type": obj_type},
            ).fetchone()

            if row:
                current_value = row[0]
                conn.execute(
                    text("""
                        UPDATE _sequences
                        SET next_value = next_value + 1
                        WHERE obj_type = :obj_type
                    """),
                    {"obj_type": obj_type},
                )
            else:
                # Insert new sequence starting at 1
                current_value = 1
                conn.execute(
                    text("""
                        INSERT INTO _sequences (obj_type, next_value)
                        VALUES (:obj_type, 2)
                    """),
                    {"obj_type": obj_type},
                )

        return current_value

    def current_value(self, obj_type: str) -> int:
        """Get the last issued value without incrementing. Returns 0 if none."""
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT next_value - 1 FROM _sequences WHERE obj_type = :obj_type"),
                {"obj_type": obj_type},
            ).fetchone()
        if row is None:
            return 0
        return row[0]

    def reset(self, obj_type: str, start_value: int = 1) -> None:
        """Reset a sequence to a specific value.

        Use with caution - can cause ID collisions if records exist.
        """
        with self._engine.begin() as conn:
            conn.execute(
                text("DELETE FROM _sequences WHERE obj_type = :obj_type"),
                {"obj_type": obj_type},
            )
            conn.execute(
                text("""
                    INSERT INTO _sequences (obj_type, next_value)
                    VALUES (:obj_type, :start_value)
                """),
                {"obj_type": obj_type, "start_value": start_value},
            )

    def bump_past(self, obj_type: str, value: int) -> None:
        """Make sure the sequence will never issue ``value`` or anything below it."""
        if self.current_value(obj_type) < value:
            self.reset(obj_type, value + 1)
