# server/tests/test_progress.py
from datetime import datetime
from bson import ObjectId

from fitmentor.routers.progress import chart_series
from tests.conftest import USER_ID


class TestWeekProgress:

    def test_mark_week_creates_entry(self, client, mock_db, as_user):
        collection = mock_db.__getitem__.return_value
        collection.find_one.return_value = None
        collection.insert_one.return_value.inserted_id = ObjectId()

        response = client.put("/api/progress/week/3", json={"completed": True})

        assert response.status_code == 200
        data = response.json()
        assert data["week"] == 3
        assert data["completed"] is True
        assert data["completed_at"] is not None
        inserted = collection.insert_one.call_args[0][0]
        assert inserted["user_id"] == USER_ID
        assert inserted["week"] == 3
        mock_db.__getitem__.assert_called_with("progress")

    def test_unmark_week_updates_existing(self, client, mock_db, as_user):
        existing_id = ObjectId()
        collection = mock_db.__getitem__.return_value
        collection.find_one.return_value = {"_id": existing_id}

        response = client.put("/api/progress/week/3", json={"completed": False})

        assert response.status_code == 200
        assert response.json()["completed_at"] is None
        collection.update_one.assert_called_once_with(
            {"_id": existing_id}, {"$set": {"completed": False, "completed_at": None}}
        )
        collection.insert_one.assert_not_called()

    def test_get_missing_week_returns_null(self, client, mock_db, as_user):
        mock_db.progress.find_one.return_value = None
        response = client.get("/api/progress/week/5")
        assert response.status_code == 200
        assert response.json() is None

    def test_list_progress(self, client, mock_db, as_user):
        mock_db.progress.find.return_value.sort.return_value = [
            {"_id": ObjectId(), "user_id": USER_ID, "week": 1, "completed": True, "completed_at": datetime(2024, 2, 1)},
        ]
        response = client.get("/api/progress")
        assert response.status_code == 200
        assert response.json()[0]["week"] == 1

    def test_week_out_of_range(self, client, mock_db, as_user):
        response = client.put("/api/progress/week/13", json={"completed": True})
        assert response.status_code == 422


class TestWorkoutLogs:

    def test_save_log_with_defaults(self, client, mock_db, as_user):
        collection = mock_db.__getitem__.return_value
        collection.find_one.return_value = None
        collection.insert_one.return_value.inserted_id = ObjectId()

        response = client.put("/api/workout-logs/2", json={"notes": "Felt strong"})

        assert response.status_code == 200
        data = response.json()
        assert data["intensity"] == "medium"
        assert data["duration"] == 30
        assert data["rating"] == 3
        assert data["notes"] == "Felt strong"
        mock_db.__getitem__.assert_called_with("workout_logs")

    def test_invalid_rating_rejected(self, client, mock_db, as_user):
        response = client.put("/api/workout-logs/2", json={"rating": 6})
        assert response.status_code == 422

    def test_invalid_intensity_rejected(self, client, mock_db, as_user):
        response = client.put("/api/workout-logs/2", json={"intensity": "extreme"})
        assert response.status_code == 422

    def test_delete_only_own_log(self, client, mock_db, as_user):
        log_id = ObjectId()
        mock_db.workout_logs.delete_one.return_value.deleted_count = 1

        response = client.delete(f"/api/workout-logs/{log_id}")

        assert response.status_code == 200
        mock_db.workout_logs.delete_one.assert_called_once_with({"_id": log_id, "user_id": USER_ID})

    def test_delete_missing_log(self, client, mock_db, as_user):
        mock_db.workout_logs.delete_one.return_value.deleted_count = 0
        response = client.delete(f"/api/workout-logs/{ObjectId()}")
        assert response.status_code == 404


class TestMeasurements:

    def test_add_measurement(self, client, mock_db, as_user):
        mock_db.measurements.insert_one.return_value.inserted_id = ObjectId()

        response = client.post("/api/measurements", json={"weight": 71.5, "waist": 82})

        assert response.status_code == 200
        data = response.json()
        assert data["weight"] == 71.5
        assert data["chest"] is None
        stored = mock_db.measurements.insert_one.call_args[0][0]
        assert stored["user_id"] == USER_ID

    def test_empty_measurement_rejected(self, client, mock_db, as_user):
        response = client.post("/api/measurements", json={})
        assert response.status_code == 400
        mock_db.measurements.insert_one.assert_not_called()

    def test_negative_measurement_rejected(self, client, mock_db, as_user):
        response = client.post("/api/measurements", json={"hips": -1})
        assert response.status_code == 422

    def test_list_sorted_by_date(self, client, mock_db, as_user):
        mock_db.measurements.find.return_value.sort.return_value = []
        response = client.get("/api/measurements")
        assert response.status_code == 200
        mock_db.measurements.find.return_value.sort.assert_called_with("created_at", 1)

    def test_chart_endpoint(self, client, mock_db, as_user):
        mock_db.measurements.find.return_value.sort.return_value = [
            {"_id": ObjectId(), "weight": 72.0, "created_at": datetime(2024, 3, 1)},
            {"_id": ObjectId(), "weight": 71.2, "created_at": datetime(2024, 3, 8)},
        ]
        response = client.get("/api/measurements/chart/weight")
        assert response.status_code == 200
        assert response.json() == {"label": "Weight", "labels": ["2024-03-01", "2024-03-08"], "values": [72.0, 71.2]}

    def test_chart_unknown_metric(self, client, mock_db, as_user):
        response = client.get("/api/measurements/chart/neck")
        assert response.status_code == 400


def test_chart_series_skips_missing_values():
    entries = [
        {"waist": 84.0, "created_at": datetime(2024, 1, 1)},
        {"weight": 70.0, "created_at": datetime(2024, 1, 8)},
        {"waist": 82.5, "created_at": datetime(2024, 1, 15)},
    ]
    chart = chart_series(entries, "waist")
    assert chart.labels == ["2024-01-01", "2024-01-15"]
    assert chart.values == [84.0, 82.5]
