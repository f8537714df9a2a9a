# storefront/services/notification_service.py
from kombu.exceptions import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, RetryError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def broker_retry():
    return retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(OperationalError),
    )


class NotificationService:
    """
    Order notifications dispatched through Celery.

    Runs after the order transaction has committed, so a broker outage is
    logged and does not fail the request.
    """

    def send_order_placed(self, user_id: int, order_id: int) -> bool:
        return self._dispatch(send_order_placed_task, user_id, order_id)

    def send_status_changed(self, user_id: int, order_id: int, status: str) -> bool:
        return self._dispatch(send_status_changed_task, user_id, order_id, status)

    def _dispatch(self, task, *args) -> bool:
        try:
            self._enqueue(task, *args)
        except RetryError as e:
            logger.warning(f"Could not enqueue {task.name}{args}: {e.last_attempt.exception()}")
            return False
        return True

    @broker_retry()
    def _enqueue(self, task, *args):
        task.delay(*args)


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(user_id: int, order_id: int):
    """
    A real deployment would send an email or push message here, for now it only logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} has been placed")
    return {"user_id": user_id, "order_id": order_id, "event": "placed"}


@celery_app.task(name="storefront.services.notification_service.send_status_changed_task")
def send_status_changed_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "event": "status", "status": status}
