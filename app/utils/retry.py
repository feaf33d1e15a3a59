# app/utils/retry.py
from sqlalchemy.exc import IntegrityError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.utils.settings import CART_CONFLICT_RETRIES


def conflict_retry():
    """Retry a get-or-insert when a concurrent insert wins the unique constraint."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(CART_CONFLICT_RETRIES),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(IntegrityError),
    )
