from __future__ import annotations

import csv
import io

from driver_schedule.domain.models import Caller, DriverTask
from driver_schedule.domain.schedule import day_name, hours_to_time_string
from driver_schedule.services.driver_task_service import DriverTaskService

CSV_COLUMNS = [
    "id",
    "driver_id",
    "type",
    "week",
    "day",
    "day_name",
    "start",
    "end",
    "start_time",
    "end_time",
    "location",
]


def _row(task: DriverTask) -> list[object]:
    return [
        task.id,
        task.driver_id,
        task.type.value,
        task.week,
        task.day,
        day_name(task.day),
        task.start,
        task.end,
        hours_to_time_string(task.start),
        hours_to_time_string(task.end),
        task.location,
    ]


def render_tasks_csv(tasks: list[DriverTask]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for task in sorted(tasks, key=lambda item: (item.day, item.start, item.id)):
        writer.writerow(_row(task))
    return buffer.getvalue()


class DriverTaskExporter:
    def __init__(self, task_service: DriverTaskService) -> None:
        self._task_service = task_service

    def export_week(self, driver_id: int, week: int, caller: Caller) -> str:
        tasks = self._task_service.get_weekly_user_tasks(driver_id, week, caller)
        return render_tasks_csv(tasks)

    @staticmethod
    def filename(driver_id: int, week: int) -> str:
        return f"driver-{driver_id}-week-{week:02d}.csv"
