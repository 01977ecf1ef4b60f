"""
Progress and statistics for a user's OJT tasks.

Two entry points share one rounding rule (``percentage``):

* ``overall_progress`` / ``category_progress`` aggregate in SQL and back the
  ``/api/progress`` endpoint.
* ``summarize_tasks`` and friends work on an already-loaded task list and back
  ``/api/stats``.
"""
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from app.db.models.lookup import STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING
from app.db.runner import SQLRunner

MILESTONES = [
    (25, "25% Complete"),
    (50, "Halfway There!"),
    (75, "75% Complete"),
    (100, "All Done!"),
]

OVERALL_SQL = """
    SELECT
        COUNT(t.id) AS total_tasks,
        COUNT(CASE WHEN ts.name = :completed THEN 1 END) AS completed_tasks,
        COUNT(CASE WHEN ts.name = :in_progress THEN 1 END) AS in_progress_tasks,
        COUNT(CASE WHEN ts.name = :pending THEN 1 END) AS pending_tasks
    FROM tasks t
    LEFT JOIN task_statuses ts ON t.status_id = ts.id
    WHERE t.user_id = :user_id
"""

# Categories without tasks for the user are left out (t.id IS NOT NULL)
BY_CATEGORY_SQL = """
    SELECT
        c.id AS id,
        c.name AS name,
        c.color_hex AS color_hex,
        COUNT(t.id) AS total,
        COUNT(CASE WHEN ts.name = :completed THEN 1 END) AS completed
    FROM categories c
    LEFT JOIN tasks t ON c.id = t.category_id AND t.user_id = :user_id
    LEFT JOIN task_statuses ts ON t.status_id = ts.id
    WHERE t.id IS NOT NULL
    GROUP BY c.id, c.name, c.color_hex
    ORDER BY c.name
"""


def percentage(part: float, total: float) -> float:
    """part/total as a percentage rounded to 2 places; 0 when total is 0."""
    if not total:
        return 0.0
    return round(float(part) / float(total) * 100, 2)


def _status_params() -> dict:
    return {
        "completed": STATUS_COMPLETED,
        "in_progress": STATUS_IN_PROGRESS,
        "pending": STATUS_PENDING,
    }


def overall_progress(runner: SQLRunner, user_id: int) -> dict:
    row = runner.fetch_one(OVERALL_SQL, {"user_id": user_id, **_status_params()}) or {}
    total = int(row.get("total_tasks") or 0)
    completed = int(row.get("completed_tasks") or 0)
    return {
        "total_tasks": total,
        "completed_tasks": completed,
        "in_progress_tasks": int(row.get("in_progress_tasks") or 0),
        "pending_tasks": int(row.get("pending_tasks") or 0),
        "completion_percentage": percentage(completed, total),
    }


def category_progress(runner: SQLRunner, user_id: int) -> List[dict]:
    rows = runner.fetch_all(BY_CATEGORY_SQL, {"user_id": user_id, "completed": STATUS_COMPLETED})
    result = []
    for row in rows:
        total = int(row["total"] or 0)
        completed = int(row["completed"] or 0)
        result.append({
            "id": row["id"],
            "name": row["name"],
            "color_hex": row["color_hex"],
            "total": total,
            "completed": completed,
            "percentage": percentage(completed, total),
        })
    return result


# --- In-memory summaries over task dicts (see Task.to_dict) ---

def _status(task: dict) -> str:
    return (task.get("status_name") or "").lower()


def _is_completed(task: dict) -> bool:
    return _status(task) == STATUS_COMPLETED.lower()


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def summarize_tasks(tasks: List[dict]) -> dict:
    total = len(tasks)
    completed = sum(1 for t in tasks if _is_completed(t))
    return {
        "total": total,
        "completed": completed,
        "in_progress": sum(1 for t in tasks if _status(t) == STATUS_IN_PROGRESS.lower()),
        "pending": sum(1 for t in tasks if _status(t) == STATUS_PENDING.lower()),
        "completion_rate": percentage(completed, total),
    }


def by_priority(tasks: Iterable[dict]) -> Dict[str, int]:
    counts: Dict[str, int] = {"high": 0, "medium": 0, "low": 0}
    for task in tasks:
        level = (task.get("priority_name") or "medium").lower()
        if level in counts:
            counts[level] += 1
    return counts


def overdue_tasks(tasks: Iterable[dict], today: Optional[date] = None) -> List[dict]:
    today = today or date.today()
    return [
        t for t in tasks
        if not _is_completed(t) and _as_date(t.get("due_date")) is not None
        and _as_date(t.get("due_date")) < today
    ]


def due_this_week(tasks: Iterable[dict], today: Optional[date] = None) -> List[dict]:
    today = today or date.today()
    week_end = today + timedelta(days=7)
    result = []
    for t in tasks:
        due = _as_date(t.get("due_date"))
        if due is not None and not _is_completed(t) and today <= due <= week_end:
            result.append(t)
    return result


def hours_progress(tasks: Iterable[dict], required: float) -> dict:
    rendered = round(sum(float(t.get("hours_rendered") or 0) for t in tasks), 2)
    return {
        "rendered": rendered,
        "required": required,
        "remaining": round(max(required - rendered, 0.0), 2),
        "percentage": min(percentage(rendered, required), 100.0),
    }


def milestones(progress: float) -> List[dict]:
    return [
        {"percentage": pct, "label": label, "achieved": progress >= pct}
        for pct, label in MILESTONES
    ]


def next_milestone(progress: float, total: int) -> Optional[dict]:
    """First unachieved milestone and how many more completed tasks reach it."""
    for pct, label in MILESTONES:
        if progress < pct:
            gap = pct - progress
            tasks_needed = math.ceil(round(gap / 100 * total, 6))
            return {
                "milestone": {"percentage": pct, "label": label},
                "progress": progress,
                "percentage_to_next": round(gap, 2),
                "tasks_to_complete": tasks_needed,
            }
    return None
