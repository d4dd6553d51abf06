"""조회된 기록 목록을 요약 수치로 줄이는 순수 함수들."""

import math
from typing import Iterable

NUTRIENTS = ("calories", "protein", "carbs", "fat")


def daily_nutrition_totals(meals: Iterable[dict]) -> dict:
    """하루치 식사의 칼로리/단백질/탄수화물/지방 합계.

    값이 없는 항목은 합계에 0으로 더해지지만 식사 개수에서는 빠지지 않는다.
    """
    totals = {key: 0 for key in NUTRIENTS}
    count = 0
    for meal in meals:
        count += 1
        for key in NUTRIENTS:
            totals[key] += meal.get(key) or 0
    return {"count": count, **totals}


def average_duration(workouts: Iterable[dict]) -> int:
    # duration이 없는 운동은 분자와 분모 모두에서 제외
    durations = [w["duration"] for w in workouts if w.get("duration") is not None]
    if not durations:
        return 0
    # .5는 올림
    return int(math.floor(sum(durations) / len(durations) + 0.5))


def workout_summary(workouts: list[dict]) -> dict:
    return {"count": len(workouts), "avg_duration": average_duration(workouts)}


def exercise_stats(rows: Iterable[dict], limit: int = 5) -> list[dict]:
    """운동 이름별 평균/최대 중량과 평균 반복 횟수. 최대 중량 내림차순 상위 limit개."""
    grouped: dict[str, dict] = {}
    for row in rows:
        group = grouped.setdefault(row["name"], {"weights": [], "reps": []})
        if row.get("weight") is not None:
            group["weights"].append(row["weight"])
        if row.get("reps") is not None:
            group["reps"].append(row["reps"])

    stats = []
    for name, group in grouped.items():
        weights, reps = group["weights"], group["reps"]
        stats.append({
            "name": name,
            "avg_weight": round(sum(weights) / len(weights), 1) if weights else None,
            "max_weight": max(weights) if weights else None,
            "avg_reps": round(sum(reps) / len(reps), 1) if reps else None,
        })

    # 중량 기록이 없는 운동은 맨 뒤로
    stats.sort(key=lambda s: (s["max_weight"] is None, -(s["max_weight"] or 0), s["name"]))
    return stats[:limit]


def weight_trend(entries: list[dict]) -> dict:
    """날짜 오름차순으로 정렬된 체중 기록의 현재값, 변화량, 평균, 추세."""
    if len(entries) < 2:
        current = entries[-1]["weight"] if entries else 0
        return {
            "current": current,
            "change": 0,
            "average": round(current, 1) if entries else 0,
            "trend": "stable",
            "count": len(entries),
        }

    first, latest = entries[0]["weight"], entries[-1]["weight"]
    raw_change = latest - first
    average = round(sum(e["weight"] for e in entries) / len(entries), 1)
    # 추세는 반올림 전 값으로 판단
    if raw_change < 0:
        trend = "decreasing"
    elif raw_change > 0:
        trend = "increasing"
    else:
        trend = "stable"
    return {
        "current": latest,
        "change": round(raw_change, 1),
        "average": average,
        "trend": trend,
        "count": len(entries),
    }
