import sqlite3
from datetime import datetime, timezone
from typing import Optional
from contextlib import contextmanager

from models import Task, TaskCreate

DATABASE_PATH = "taskflow.db"

UPDATABLE_COLUMNS = ("name", "description", "assignee", "due_date", "priority", "status")


@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize database by running Alembic migrations."""
    import subprocess
    import os

    # Run alembic upgrade from the backend directory against DATABASE_PATH
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    env = dict(os.environ, DATABASE_URL=f"sqlite:///{os.path.abspath(DATABASE_PATH)}")
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=backend_dir,
        env=env,
        check=True
    )

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        name=row["name"],
        description=row["description"] or "",
        assignee=row["assignee"],
        due_date=row["due_date"],
        priority=row["priority"],
        status=row["status"],
        completed=row["completed"],
        created_at=row["created_at"],
    )


def get_all_tasks(priority: Optional[str] = None, assignee: Optional[str] = None) -> list[Task]:
    """
    Get tasks ordered by due date, optionally filtered.
    A filter of None or "all" matches every task.
    """
    clauses = []
    params = []
    if priority and priority != "all":
        clauses.append("priority = ?")
        params.append(priority)
    if assignee and assignee != "all":
        clauses.append("assignee = ?")
        params.append(assignee)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM tasks {where} ORDER BY due_date, id",
            params
        ).fetchall()
        return [_row_to_task(row) for row in rows]

def get_task_db(task_id: int) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row:
            return _row_to_task(row)
    return None

def _insert_task(conn, task: TaskCreate) -> int:
    created_at = _now()
    completed = created_at if task.status == "completed" else None
    cursor = conn.execute(
        """INSERT INTO tasks
           (name, description, assignee, due_date, priority, status, completed, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        (task.name, task.description, task.assignee, task.due_date, task.priority, task.status, completed, created_at)
    )
    return cursor.lastrowid

def create_task_db(task: TaskCreate) -> Task:
    """Persist a task candidate. The store assigns id, created_at and completed."""
    with get_db() as conn:
        task_id = _insert_task(conn, task)
        conn.commit()
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(row)

def create_tasks_db(tasks: list[TaskCreate]) -> list[Task]:
    """
    Persist several task candidates in one transaction.
    Either every task is stored or none is.
    """
    with get_db() as conn:
        try:
            ids = [_insert_task(conn, task) for task in tasks]
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return [
            _row_to_task(conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone())
            for task_id in ids
        ]

def update_task_db(task_id: int, **updates) -> Optional[Task]:
    """
    Update a task with any fields provided.
    Only updates fields that differ from current values.
    Moving status to "completed" stamps the completed timestamp; moving away clears it.

    Args:
        task_id: Task ID to update
        **updates: Field names and values to update (name, description, assignee, due_date, priority, status)
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            return None

        # Filter updates: only include known fields that differ from current values
        changes = {}
        for field, new_value in updates.items():
            if field not in UPDATABLE_COLUMNS or new_value is None:
                continue
            if new_value != row[field]:
                changes[field] = new_value

        if "status" in changes:
            changes["completed"] = _now() if changes["status"] == "completed" else None

        # Execute UPDATE only if there are actual changes
        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()

        # Return updated task (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)

def delete_task_db(task_id: int) -> bool:
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
        return cursor.rowcount > 0

def get_assignees() -> list[str]:
    """Distinct non-empty assignees, for the board's assignee filter."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT DISTINCT assignee FROM tasks WHERE assignee IS NOT NULL AND assignee != '' ORDER BY assignee"
        ).fetchall()
        return [row["assignee"] for row in rows]

def get_task_stats() -> dict:
    """Counts shown on the board: total, completed, and everything not completed."""
    with get_db() as conn:
        row = conn.execute(
            """SELECT COUNT(*) AS total,
                      COALESCE(SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END), 0) AS completed
               FROM tasks"""
        ).fetchone()
        total, completed = row["total"], row["completed"]
        return {"total": total, "completed": completed, "pending": total - completed}
