from unittest.mock import MagicMock

from kombu.exceptions import OperationalError
from tenacity import wait_none

from storefront.services.notification_service import (
    NotificationService,
    send_order_placed_task,
    send_status_changed_task,
)


def test_tasks_run_eagerly():
    result = send_order_placed_task.delay(1, 10)
    assert result.get() == {"user_id": 1, "order_id": 10, "event": "placed"}

    result = send_status_changed_task.delay(1, 10, "shipped")
    assert result.get()["status"] == "shipped"


def test_dispatch_retries_then_succeeds(monkeypatch):
    task = MagicMock()
    task.delay.side_effect = [OperationalError("broker down"), None]
    svc = NotificationService()
    monkeypatch.setattr(svc._enqueue.retry, "wait", wait_none())

    assert svc._dispatch(task, 1, 2) is True
    assert task.delay.call_count == 2


def test_dispatch_gives_up_without_raising(monkeypatch):
    task = MagicMock()
    task.name = "fake.task"
    task.delay.side_effect = OperationalError("broker down")
    svc = NotificationService()
    monkeypatch.setattr(svc._enqueue.retry, "wait", wait_none())

    assert svc._dispatch(task, 1, 2) is False
    assert task.delay.call_count == 3


def test_order_placed_goes_through_celery():
    assert NotificationService().send_order_placed(3, 30) is True
