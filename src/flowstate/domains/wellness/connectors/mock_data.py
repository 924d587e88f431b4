"""Mock health-SDK payloads for development and testing.

Shapes follow the aggregation SDK's activity / daily / sleep payloads closely
enough for display; the dashboard never interprets them.
"""

from __future__ import annotations

from datetime import datetime


def _window(start_date: datetime, end_date: datetime) -> dict:
    return {
        "start_time": start_date.isoformat(),
        "end_time": end_date.isoformat(),
    }


def get_mock_activity_payload(start_date: datetime, end_date: datetime) -> dict:
    """Return one mock outdoor run in the requested window."""
    return {
        "type": "activity",
        "data": [
            {
                "metadata": {
                    "name": "Outdoor Run",
                    "type": 8,
                    "summary_id": 1,
                    "upload_type": 1,
                    **_window(start_date, end_date),
                },
                "device_data": {"name": "Apple Watch", "manufacturer": "Apple"},
                "active_durations_data": {"activity_seconds": 1860.0},
                "distance_data": {
                    "summary": {
                        "distance_meters": 5020.0,
                        "steps": 6310,
                        "floors_climbed": 3,
                    },
                },
                "heart_rate_data": {
                    "summary": {
                        "max_hr_bpm": 171.0,
                        "min_hr_bpm": 92.0,
                        "avg_hr_bpm": 148.0,
                        "avg_hrv_sdnn": 38.5,
                    },
                },
                "calories_data": {
                    "total_burned_calories": 412.0,
                    "BMR_calories": 1610.0,
                    "net_activity_calories": 398.0,
                },
                "movement_data": {
                    "avg_speed_meters_per_second": 2.7,
                    "max_speed_meters_per_second": 3.9,
                    "avg_cadence_rpm": 82.0,
                },
            }
        ],
    }


def get_mock_daily_payload(start_date: datetime, end_date: datetime) -> dict:
    """Return a mock daily summary."""
    return {
        "type": "daily",
        "data": [
            {
                "metadata": _window(start_date, end_date),
                "distance_data": {"steps": 8420, "distance_meters": 6100.0},
                "calories_data": {"total_burned_calories": 2310.0},
                "heart_rate_data": {
                    "summary": {"resting_hr_bpm": 64.0, "avg_hrv_sdnn": 44.0},
                },
                "stress_data": {"avg_stress_level": 41},
            }
        ],
    }


def get_mock_sleep_payload(start_date: datetime, end_date: datetime) -> dict:
    """Return a mock night of sleep."""
    return {
        "type": "sleep",
        "data": [
            {
                "metadata": _window(start_date, end_date),
                "sleep_durations_data": {
                    "asleep": {
                        "duration_asleep_state_seconds": 25200,
                        "duration_deep_sleep_state_seconds": 5400,
                        "duration_REM_sleep_state_seconds": 6300,
                    },
                    "sleep_efficiency": 0.91,
                },
                "heart_rate_data": {"summary": {"avg_hr_bpm": 56.0}},
            }
        ],
    }
