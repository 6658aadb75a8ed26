"""Aggregations served by the dashboard, progress stats and share endpoints."""
from __future__ import annotations
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List

from habit_tracker.storage import Record


def completion_stats(progress: Iterable[Record], days: int) -> Dict[str, float]:
    """Completed versus missed days over a window of ``days`` days."""
    completed_days = sum(1 for p in progress if p["completed"])
    completion_rate = (completed_days / days) * 100 if days > 0 else 0
    return {
        "completed_days": completed_days,
        "total_days": days,
        "completion_rate": round(completion_rate, 2),
        "missed_days": days - completed_days,
    }


def activity_by_date(progress: Iterable[Record]) -> Dict[str, Dict[str, int]]:
    """Per-day counts of completed and total records, keyed by ISO date."""
    chart: Dict[str, Dict[str, int]] = OrderedDict()
    for record in sorted(progress, key=lambda p: p["date"]):
        key = record["date"].isoformat() if isinstance(record["date"], date) else str(record["date"])
        entry = chart.setdefault(key, {"completed": 0, "total": 0})
        entry["total"] += 1
        if record["completed"]:
            entry["completed"] += 1
    return chart


def habit_totals(habits: List[Record]) -> Dict[str, int]:
    """Totals across habits, read from their cached streak fields."""
    current_streaks = [h.get("current_streak") or 0 for h in habits]
    average_streak = round(sum(current_streaks) / len(current_streaks)) if current_streaks else 0
    return {
        "totalHabits": len(habits),
        "totalCompletions": sum(h.get("total_completions") or 0 for h in habits),
        "longestStreak": max([h.get("longest_streak") or 0 for h in habits] + [0]),
        "averageStreak": average_streak,
    }


def dashboard(habits: List[Record], today_progress: List[Record], recent_activity: List[Record]) -> Dict[str, object]:
    return {
        "total_habits": len(habits),
        "active_habits": sum(1 for h in habits if h["is_active"]),
        "completed_today": sum(1 for p in today_progress if p["completed"]),
        "total_completions": sum(h.get("total_completions") or 0 for h in habits),
        # Highest streak still running
        "longest_streak": max([h.get("current_streak") or 0 for h in habits] + [0]),
        "recent_activity": [{"date": p["date"], "completed": p["completed"]} for p in recent_activity],
    }
