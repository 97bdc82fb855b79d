"""Example: drive the attendance services directly (without Flask).

Controllers are a thin layer; the attendance flow lives in the services.
"""

import asyncio
import importlib
from datetime import date

from config import get_settings_module

from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.settings import AppSettings
from src.class_attendance.class_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=AppSettings.from_module(settings))
    admin = container.runner.call(container.sessions.get_or_open, "example")

    async def flow():
        await admin.attendance.select_class("0b7a4c52-2f1e-4d8c-9a51-1f3c5d7e9a01", date.today())
        for row in admin.attendance.view()[:1]:
            admin.attendance.toggle(row["member_id"], AttendanceStatus.PRESENT)
        result = await admin.attendance.publish()
        return result, admin.attendance.view(), admin.feedback.snapshot().to_dict()

    result, rows, feedback = container.runner.run(flow())
    print("published:", result.written, "entries")
    print(rows)
    print(feedback["notifications"])
    container.shutdown()


if __name__ == "__main__":
    main()
