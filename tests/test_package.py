"""Import-time checks for the package and its public core."""

import importlib
from datetime import date, time

import pytest


@pytest.mark.parametrize(
    "module",
    [
        "syllabus_sync",
        "syllabus_sync.core",
        "syllabus_sync.core.tasks",
        "syllabus_sync.workflows",
        "syllabus_sync.cli",
    ],
)
def test_modules_import(module):
    assert importlib.import_module(module) is not None


def test_task_from_public_core():
    from syllabus_sync.core import Task

    task = Task(title="Midterm", date=date(2025, 3, 10), time=time(14, 30))
    assert task.title == "Midterm"
    assert task.date == date(2025, 3, 10)
    assert task.time == time(14, 30)
    assert Task(title="Reading", date=date(2025, 3, 11)).time is None
