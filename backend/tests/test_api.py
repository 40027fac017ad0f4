from datetime import date

import pytest

API = "/api/v1"


@pytest.fixture
def calendar(client):
    response = client.post(
        f"{API}/calendars/",
        json={
            "name": "Team sync",
            "timezone": "Europe/Paris",
            "threshold": 2,
            "allowed_weekdays": [1, 3],
            "participants": ["Alice", "Bob"],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def participant_id(calendar, name):
    return next(p["id"] for p in calendar["participants"] if p["name"] == name)


def public(calendar, name, suffix=""):
    return f"{API}/public/{calendar['public_token']}/participants/{participant_id(calendar, name)}{suffix}"


def add_monday_recurrence(client, calendar, name="Alice", **overrides):
    body = {"day_of_week": 1, "start_date": "2025-01-01", "start_time": "09:00", "end_time": "17:00"}
    body.update(overrides)
    return client.post(public(calendar, name, "/recurrences"), json=body)


def summary(client, calendar, start="2025-01-01", end="2025-01-31", **params):
    response = client.get(
        f"{API}/public/{calendar['public_token']}/summary",
        params={"start": start, "end": end, **params},
    )
    assert response.status_code == 200, response.text
    return {row["date"]: row for row in response.json()}


def test_health(client):
    response = client.get(f"{API}/health/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_calendar_defaults(client):
    response = client.post(f"{API}/calendars/", json={"name": "Board games"})

    assert response.status_code == 201
    body = response.json()
    assert body["allowed_weekdays"] == [0, 1, 2, 3, 4, 5, 6]
    assert body["timezone"] == "Europe/Paris"
    assert body["threshold"] == 1
    assert body["holidays_policy"] == "ignore"
    assert len(body["public_token"]) == 64


def test_weekly_and_one_off_availability_reach_quorum(client, calendar):
    assert add_monday_recurrence(client, calendar).status_code == 201
    response = client.post(
        public(calendar, "Bob", "/availabilities"),
        json={"date": "2025-01-06", "start_time": "10:00", "end_time": "12:00"},
    )
    assert response.status_code == 201, response.text

    days = summary(client, calendar)

    target = days["2025-01-06"]
    assert target["total_count"] == 2
    assert target["is_viable"] is True
    assert [p["participant_name"] for p in target["participants"]] == ["Alice", "Bob"]
    assert target["participants"][0]["start_time"] == "09:00"
    for day, row in days.items():
        if day != "2025-01-06":
            assert row["total_count"] <= 1
            assert date.fromisoformat(day).weekday() == 0


def test_duplicate_one_off_is_a_conflict(client, calendar):
    url = public(calendar, "Bob", "/availabilities")
    assert client.post(url, json={"date": "2025-01-06"}).status_code == 201

    response = client.post(url, json={"date": "2025-01-06"})

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_one_off_on_disallowed_weekday_is_rejected(client, calendar):
    response = client.post(public(calendar, "Bob", "/availabilities"), json={"date": "2025-01-07"})

    assert response.status_code == 422
    assert response.json()["code"] == "POLICY_VIOLATION"


def test_one_off_times_are_clamped_into_weekday_window(client, calendar):
    client.patch(
        f"{API}/calendars/{calendar['id']}",
        json={"weekday_times": {"1": {"min_time": "09:00", "max_time": "18:00"}}},
    )
    url = public(calendar, "Bob", "/availabilities")

    clamped = client.post(url, json={"date": "2025-01-06", "start_time": "08:00", "end_time": "20:00"})
    all_day = client.post(url, json={"date": "2025-01-13"})
    outside = client.post(url, json={"date": "2025-01-20", "start_time": "19:00", "end_time": "20:00"})

    assert (clamped.json()["start_time"], clamped.json()["end_time"]) == ("09:00", "18:00")
    assert (all_day.json()["start_time"], all_day.json()["end_time"]) == ("09:00", "18:00")
    assert outside.status_code == 422


def test_reversed_times_are_a_validation_error(client, calendar):
    response = client.post(
        public(calendar, "Bob", "/availabilities"),
        json={"date": "2025-01-06", "start_time": "12:00", "end_time": "10:00"},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION"


def test_update_and_delete_one_off_by_date(client, calendar):
    url = public(calendar, "Bob", "/availabilities")
    client.post(url, json={"date": "2025-01-06", "start_time": "10:00", "end_time": "12:00"})

    updated = client.patch(f"{url}/2025-01-06", json={"end_time": "15:00", "note": "late lunch"})
    assert updated.status_code == 200
    assert updated.json()["start_time"] == "10:00"
    assert updated.json()["end_time"] == "15:00"
    assert updated.json()["note"] == "late lunch"

    assert client.delete(f"{url}/2025-01-06").status_code == 204
    assert client.get(url).json() == []
    assert client.delete(f"{url}/2025-01-06").status_code == 404


def test_one_off_shorter_than_min_duration_is_rejected(client, calendar):
    client.patch(f"{API}/calendars/{calendar['id']}", json={"min_duration_hours": 2})
    url = public(calendar, "Bob", "/availabilities")

    short = client.post(url, json={"date": "2025-01-06", "start_time": "10:00", "end_time": "10:30"})
    assert short.status_code == 422
    assert short.json()["code"] == "POLICY_VIOLATION"
    assert client.get(url).json() == []

    assert client.post(
        url, json={"date": "2025-01-06", "start_time": "10:00", "end_time": "12:00"}
    ).status_code == 201
    assert client.post(url, json={"date": "2025-01-13"}).status_code == 201

    shortened = client.patch(f"{url}/2025-01-06", json={"end_time": "11:00"})
    assert shortened.status_code == 422
    assert client.get(url).json()[0]["end_time"] == "12:00"


def test_recurrence_on_disallowed_weekday_is_rejected(client, calendar):
    response = add_monday_recurrence(client, calendar, day_of_week=2)

    assert response.status_code == 422
    assert response.json()["code"] == "POLICY_VIOLATION"


def test_overlapping_recurrences_conflict(client, calendar):
    assert add_monday_recurrence(client, calendar, end_date="2025-03-31").status_code == 201

    overlapping = add_monday_recurrence(client, calendar, start_date="2025-03-01")
    after = add_monday_recurrence(client, calendar, start_date="2025-04-01")

    assert overlapping.status_code == 409
    assert after.status_code == 201
    assert len(client.get(public(calendar, "Alice", "/recurrences")).json()) == 2


def test_recurrence_missing_bound_takes_weekday_window(client, calendar):
    client.patch(
        f"{API}/calendars/{calendar['id']}",
        json={"weekday_times": {"1": {"min_time": "09:00", "max_time": "17:00"}}},
    )

    response = add_monday_recurrence(client, calendar, start_time="10:00", end_time=None)
    open_rule = add_monday_recurrence(
        client, calendar, name="Bob", start_time=None, end_time=None
    )

    assert response.status_code == 201, response.text
    assert (response.json()["start_time"], response.json()["end_time"]) == ("10:00", "17:00")
    assert (open_rule.json()["start_time"], open_rule.json()["end_time"]) == (None, None)
    alice = summary(client, calendar)["2025-01-06"]["participants"][0]
    assert (alice["start_time"], alice["end_time"]) == ("10:00", "17:00")


def test_recurrence_shorter_than_min_duration_is_rejected(client, calendar):
    client.patch(f"{API}/calendars/{calendar['id']}", json={"min_duration_hours": 2})

    short = add_monday_recurrence(client, calendar, start_time="10:00", end_time="11:00")
    assert short.status_code == 422
    assert short.json()["code"] == "POLICY_VIOLATION"

    created = add_monday_recurrence(client, calendar)
    assert created.status_code == 201
    rule = created.json()
    shortened = client.put(
        public(calendar, "Alice", f"/recurrences/{rule['id']}"),
        json={"day_of_week": 1, "start_date": "2025-01-01", "start_time": "16:00", "end_time": "17:00"},
    )
    assert shortened.status_code == 422
    assert client.get(public(calendar, "Alice", "/recurrences")).json()[0]["start_time"] == "09:00"


def test_recurrence_exception_removes_single_date(client, calendar):
    recurrence = add_monday_recurrence(client, calendar).json()
    url = public(calendar, "Alice", f"/recurrences/{recurrence['id']}/exceptions")

    created = client.post(url, json={"excluded_date": "2025-01-13"})
    duplicate = client.post(url, json={"excluded_date": "2025-01-13"})

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert "2025-01-13" not in summary(client, calendar)
    listed = client.get(public(calendar, "Alice", "/recurrences")).json()
    assert [e["excluded_date"] for e in listed[0]["exceptions"]] == ["2025-01-13"]

    assert client.delete(f"{url}/2025-01-13").status_code == 204
    assert "2025-01-13" in summary(client, calendar)
    assert client.delete(f"{url}/2025-01-13").status_code == 404


def test_deleting_participant_cascades_and_lowers_threshold(client, calendar):
    add_monday_recurrence(client, calendar)
    client.post(public(calendar, "Bob", "/availabilities"), json={"date": "2025-01-06"})

    response = client.delete(
        f"{API}/calendars/{calendar['id']}/participants/{participant_id(calendar, 'Alice')}"
    )

    assert response.status_code == 204
    days = summary(client, calendar)
    assert list(days) == ["2025-01-06"]
    assert [p["participant_name"] for p in days["2025-01-06"]["participants"]] == ["Bob"]
    refreshed = client.get(f"{API}/calendars/{calendar['id']}").json()
    assert refreshed["threshold"] == 1
    assert [p["name"] for p in refreshed["participants"]] == ["Bob"]


def test_participant_names_are_unique(client, calendar):
    url = f"{API}/calendars/{calendar['id']}/participants"

    assert client.post(url, json={"name": "Carol"}).status_code == 201
    assert client.post(url, json={"name": "Carol"}).status_code == 409
    rename = client.patch(f"{url}/{participant_id(calendar, 'Bob')}", json={"name": "Alice"})
    assert rename.status_code == 409


def test_threshold_cannot_exceed_participants(client, calendar):
    response = client.patch(f"{API}/calendars/{calendar['id']}", json={"threshold": 3})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION"


def test_policy_change_applies_to_existing_rows(client, calendar):
    add_monday_recurrence(client, calendar)
    assert "2025-01-06" in summary(client, calendar)

    client.patch(f"{API}/calendars/{calendar['id']}", json={"allowed_weekdays": [3]})

    assert summary(client, calendar) == {}


def test_holiday_on_disallowed_weekday_follows_holidays_policy(client, calendar, holidays):
    # Thursday, outside the Monday/Wednesday schedule
    holidays.days.add(date(2025, 1, 9))
    settings_url = f"{API}/calendars/{calendar['id']}"
    client.patch(
        settings_url,
        json={"holidays_policy": "allow", "holiday_min_time": "10:00", "holiday_max_time": "14:00"},
    )
    response = client.post(public(calendar, "Bob", "/availabilities"), json={"date": "2025-01-09"})
    assert response.status_code == 201, response.text

    bob = summary(client, calendar)["2025-01-09"]["participants"][0]
    assert (bob["start_time"], bob["end_time"]) == ("10:00", "14:00")
    assert "2025-01-16" not in summary(client, calendar)

    client.patch(settings_url, json={"holidays_policy": "block"})
    assert "2025-01-09" not in summary(client, calendar)

    client.patch(settings_url, json={"holidays_policy": "ignore"})
    assert "2025-01-09" not in summary(client, calendar)


def test_locked_calendar_hides_other_participant_ids(client, calendar):
    client.patch(f"{API}/calendars/{calendar['id']}", json={"lock_participants": True})
    alice = participant_id(calendar, "Alice")
    client.post(public(calendar, "Alice", "/availabilities"), json={"date": "2025-01-06"})
    client.post(public(calendar, "Bob", "/availabilities"), json={"date": "2025-01-06"})

    anonymous = summary(client, calendar)["2025-01-06"]["participants"]
    as_alice = summary(client, calendar, viewer_id=alice)["2025-01-06"]["participants"]

    assert [p["participant_id"] for p in anonymous] == [None, None]
    assert [p["participant_id"] for p in as_alice] == [alice, None]


def test_date_summary(client, calendar):
    client.post(public(calendar, "Bob", "/availabilities"), json={"date": "2025-01-08"})
    token = calendar["public_token"]

    busy = client.get(f"{API}/public/{token}/summary/2025-01-08").json()
    empty = client.get(f"{API}/public/{token}/summary/2025-01-09").json()

    assert busy["total_count"] == 1
    assert busy["is_viable"] is False
    assert empty["total_count"] == 0
    assert empty["participants"] == []


def test_slot_summary_lists_candidate_windows(client, calendar):
    client.patch(
        f"{API}/calendars/{calendar['id']}",
        json={
            "min_duration_hours": 1,
            "weekday_times": {"1": {"min_time": "09:00", "max_time": "12:00"}},
        },
    )
    add_monday_recurrence(client, calendar)
    client.post(
        public(calendar, "Bob", "/availabilities"),
        json={"date": "2025-01-06", "start_time": "10:00", "end_time": "12:00"},
    )

    response = client.get(
        f"{API}/public/{calendar['public_token']}/slots",
        params={"start": "2025-01-06", "end": "2025-01-06", "slot_minutes": 60},
    )

    assert response.status_code == 200, response.text
    (day,) = response.json()
    assert day["kind"] == "weekday"
    assert [s["count"] for s in day["slots"]] == [1, 2, 2]
    assert day["candidate_windows"] == [
        {"start": "10:00", "end": "12:00", "min_count": 2, "duration_minutes": 120}
    ]


def test_query_range_is_limited(client, calendar):
    response = client.get(
        f"{API}/public/{calendar['public_token']}/summary",
        params={"start": "2025-01-01", "end": "2027-01-01"},
    )

    assert response.status_code == 400


def test_unknown_token_is_not_found(client):
    response = client.get(f"{API}/public/missing/summary", params={"start": "2025-01-01", "end": "2025-01-02"})

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
