import pytest

from fittrack.crud import workout as workout_crud


def _workout_payload(name="Push day", date="2024-03-01T10:00:00", duration=45, exercises=None):
    if exercises is None:
        exercises = [
            {"name": "Bench press", "sets": 4, "reps": 8, "weight": 80.0, "notes": "felt strong"},
            {"name": "Overhead press", "sets": 3, "reps": 10, "weight": 40.0},
            {"name": "Dips", "sets": 3, "reps": 12},
        ]
    return {"name": name, "date": date, "duration": duration, "notes": None, "exercises": exercises}


@pytest.fixture
def workout(client, alice):
    _, headers = alice
    response = client.post("/workouts", json=_workout_payload(), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_round_trip(client, alice, workout):
    _, headers = alice
    response = client.get(f"/workouts/{workout['id']}", headers=headers)
    assert response.status_code == 200
    fetched = response.json()["workout"]

    submitted = _workout_payload()["exercises"]
    assert len(fetched["exercises"]) == len(submitted)
    for original, stored in zip(submitted, fetched["exercises"]):
        assert stored["name"] == original["name"]
        assert stored["sets"] == original["sets"]
        assert stored["reps"] == original["reps"]
        assert stored["weight"] == original.get("weight")
        assert stored["notes"] == original.get("notes")
    assert fetched["duration"] == 45


def test_create_requires_name_and_date(client, alice):
    _, headers = alice
    response = client.post("/workouts", json={"name": "No date"}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Name and date are required"}


def test_create_rejects_bad_date_and_non_positive_sets(client, alice):
    _, headers = alice
    assert client.post("/workouts", json=_workout_payload(date="yesterday"), headers=headers).status_code == 400

    bad_sets = _workout_payload(exercises=[{"name": "Squat", "sets": 0, "reps": 5}])
    assert client.post("/workouts", json=bad_sets, headers=headers).status_code == 400


def test_missing_duration_is_stored_as_null(client, alice):
    _, headers = alice
    payload = _workout_payload(duration=None)
    created = client.post("/workouts", json=payload, headers=headers).json()
    assert created["duration"] is None


def test_list_filters_and_orders_descending(client, alice):
    _, headers = alice
    for name, date in [("Legs", "2024-01-01"), ("Pull", "2024-01-10"), ("Push", "2024-01-20")]:
        client.post("/workouts", json=_workout_payload(name=name, date=date), headers=headers)

    names = [w["name"] for w in client.get("/workouts", headers=headers).json()["workouts"]]
    assert names == ["Push", "Pull", "Legs"]

    ranged = client.get("/workouts", params={"from": "2024-01-05", "to": "2024-01-15"}, headers=headers)
    assert [w["name"] for w in ranged.json()["workouts"]] == ["Pull"]

    limited = client.get("/workouts", params={"limit": 2}, headers=headers)
    assert len(limited.json()["workouts"]) == 2

    by_name = client.get("/workouts", params={"name": "pu"}, headers=headers)
    assert {w["name"] for w in by_name.json()["workouts"]} == {"Push", "Pull"}

    assert client.get("/workouts", params={"from": "not-a-date"}, headers=headers).status_code == 400


def test_patch_reconciles_exercises(client, alice):
    _, headers = alice
    payload = _workout_payload(exercises=[
        {"name": "A", "sets": 3, "reps": 10, "weight": 20.0},
        {"name": "B", "sets": 3, "reps": 10, "weight": 30.0},
    ])
    created = client.post("/workouts", json=payload, headers=headers).json()
    exercise_a, exercise_b = created["exercises"]

    update = {
        "name": "Updated",
        "date": "2024-03-02",
        "duration": 50,
        "notes": "edited",
        "exercises": [
            {"id": exercise_a["id"], "name": "A", "sets": 5, "reps": 5, "weight": 25.0},
            {"id": "new", "name": "C", "sets": 2, "reps": 15},
        ],
    }
    response = client.patch(f"/workouts/{created['id']}", json=update, headers=headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    workout = client.get(f"/workouts/{created['id']}", headers=headers).json()["workout"]
    assert workout["name"] == "Updated"
    assert workout["notes"] == "edited"
    assert len(workout["exercises"]) == 2

    by_id = {e["id"]: e for e in workout["exercises"]}
    assert by_id[exercise_a["id"]]["sets"] == 5
    assert by_id[exercise_a["id"]]["weight"] == 25.0
    assert exercise_b["id"] not in by_id
    assert "new" not in by_id
    assert [e["name"] for e in workout["exercises"]] == ["A", "C"]


def test_patch_requires_name_and_date(client, alice, workout):
    _, headers = alice
    response = client.patch(f"/workouts/{workout['id']}", json={"name": "x", "exercises": []}, headers=headers)
    assert response.status_code == 400


def test_copy_clones_exercises_with_new_ids(client, alice, workout):
    _, headers = alice
    response = client.post(f"/workouts/{workout['id']}/copy", headers=headers)
    assert response.status_code == 201
    copy = response.json()

    assert copy["id"] != workout["id"]
    assert copy["name"] == "Push day (Copy)"
    assert len(copy["exercises"]) == 3
    original_ids = {e["id"] for e in workout["exercises"]}
    assert not original_ids & {e["id"] for e in copy["exercises"]}
    assert [e["name"] for e in copy["exercises"]] == [e["name"] for e in workout["exercises"]]

    # 원본은 그대로
    original = client.get(f"/workouts/{workout['id']}", headers=headers).json()["workout"]
    assert len(original["exercises"]) == 3


def test_delete_then_delete_again_is_not_found(client, alice, workout):
    _, headers = alice
    assert client.delete(f"/workouts/{workout['id']}", headers=headers).json() == {"success": True}
    assert client.get(f"/workouts/{workout['id']}", headers=headers).status_code == 404
    response = client.delete(f"/workouts/{workout['id']}", headers=headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Workout not found"}


def test_other_user_cannot_touch_workout(client, bob, workout):
    _, bob_headers = bob
    url = f"/workouts/{workout['id']}"

    assert client.get(url, headers=bob_headers).status_code == 403
    assert client.patch(url, json=_workout_payload(), headers=bob_headers).status_code == 403
    assert client.delete(url, headers=bob_headers).status_code == 403
    assert client.post(f"{url}/copy", headers=bob_headers).status_code == 403
    assert client.get("/workouts", headers=bob_headers).json()["workouts"] == []


def test_guard_checks_authentication_first(client, workout):
    assert client.get(f"/workouts/{workout['id']}").status_code == 401
    assert client.get("/workouts/does-not-exist").status_code == 401


def test_stats(client, alice):
    _, headers = alice
    client.post("/workouts", json=_workout_payload(name="W1", date="2024-02-01", duration=30, exercises=[
        {"name": "Squat", "sets": 5, "reps": 5, "weight": 100.0},
        {"name": "Bench press", "sets": 5, "reps": 5, "weight": 70.0},
    ]), headers=headers)
    client.post("/workouts", json=_workout_payload(name="W2", date="2024-02-03", duration=None, exercises=[
        {"name": "Squat", "sets": 3, "reps": 8, "weight": 90.0},
    ]), headers=headers)
    client.post("/workouts", json=_workout_payload(name="W3", date="2024-02-05", duration=60, exercises=[]),
                headers=headers)
    client.post("/workouts", json=_workout_payload(name="Old", date="2023-01-01", duration=120, exercises=[
        {"name": "Deadlift", "sets": 1, "reps": 1, "weight": 200.0},
    ]), headers=headers)

    response = client.get("/workouts/stats", params={"from": "2024-01-01"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["avgDuration"] == 45

    squat = body["exerciseStats"][0]
    assert squat["name"] == "Squat"
    assert squat["maxWeight"] == 100.0
    assert squat["avgWeight"] == 95.0
    assert squat["avgReps"] == 6.5
    assert [s["name"] for s in body["exerciseStats"]] == ["Squat", "Bench press"]


def test_stats_rejects_bad_date(client, alice):
    _, headers = alice
    assert client.get("/workouts/stats", params={"to": "31/12/2024"}, headers=headers).status_code == 400


def test_failed_patch_leaves_workout_unchanged(client, lenient_client, alice, monkeypatch):
    _, headers = alice
    created = client.post("/workouts", json=_workout_payload(name="W", exercises=[
        {"name": "A", "sets": 3, "reps": 5},
        {"name": "B", "sets": 3, "reps": 5},
    ]), headers=headers).json()
    first = created["exercises"][0]

    def broken_exercise_values(*args, **kwargs):
        raise RuntimeError("insert failed")

    # B 삭제, A 수정이 끝난 뒤 새 항목 C를 넣는 단계에서 실패
    monkeypatch.setattr(workout_crud, "_exercise_values", broken_exercise_values)
    response = lenient_client.patch(f"/workouts/{created['id']}", json=_workout_payload(name="W2", exercises=[
        {"id": first["id"], "name": "A2", "sets": 4, "reps": 6},
        {"name": "C", "sets": 1, "reps": 1},
    ]), headers=headers)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}

    monkeypatch.undo()
    stored = client.get(f"/workouts/{created['id']}", headers=headers).json()["workout"]
    assert stored["name"] == "W"
    assert [e["name"] for e in stored["exercises"]] == ["A", "B"]
    assert stored["exercises"][0]["sets"] == 3
