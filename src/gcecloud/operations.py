from __future__ import annotations

import threading
from typing import Any

from google.api_core import exceptions
from tenacity import (
    RetryError,
    Retrying,
    retry_if_result,
    stop_after_delay,
    stop_when_event_set,
    wait_fixed,
)

from .core import OPERATION_DONE, OPERATION_POLL_INTERVAL, OPERATION_TIMEOUT
from .exceptions import (
    OperationCancelled,
    OperationFailed,
    OperationTimeout,
    ProviderRequestFailed,
)
from .logger import logger
from .schemas.identity import AdapterIdentity


def _status_name(operation: Any) -> str:
    # Operation.status is the Operation.Status enum; older releases used plain strings
    status = operation.status
    return str(getattr(status, "name", status))


def _is_pending(operation: Any) -> bool:
    return _status_name(operation) != OPERATION_DONE


def _operation_errors(operation: Any) -> list[str]:
    error = getattr(operation, "error", None)
    entries = getattr(error, "errors", None) or []
    return [f"{e.code}: {e.message}" for e in entries]


def wait_for_region_operation(
    identity: AdapterIdentity,
    operation: Any,
    region: str,
    *,
    timeout: float = OPERATION_TIMEOUT,
    poll_interval: float = OPERATION_POLL_INTERVAL,
    cancel: threading.Event | None = None,
) -> Any:
    """
    Blocks until a regional operation reaches DONE and returns its final state.

    The status already held by the caller is checked first; the API is only
    queried after one poll interval has elapsed. Only the status query is
    repeated, never the mutation behind it. A query error is raised
    immediately as ProviderRequestFailed.

    Raises OperationTimeout once `timeout` seconds have passed and
    OperationCancelled as soon as `cancel` is set. A DONE operation that
    carries errors raises OperationFailed.
    """
    name = operation.name
    if cancel is None:
        cancel = threading.Event()

    current = operation
    if _is_pending(current):
        retryer = Retrying(
            retry=retry_if_result(_is_pending),
            wait=wait_fixed(poll_interval),
            stop=stop_after_delay(timeout) | stop_when_event_set(cancel),
            # Event.wait returns early when the caller cancels
            sleep=cancel.wait,
        )
        try:
            for attempt in retryer:
                with attempt:
                    if attempt.retry_state.attempt_number > 1 and not cancel.is_set():
                        current = identity.clients.region_operations.get(
                            project=identity.project_id,
                            region=region,
                            operation=name,
                        )
                        logger.debug(
                            f"Operation {name} in {region}: {_status_name(current)}"
                        )
                outcome = attempt.retry_state.outcome
                if outcome is not None and not outcome.failed:
                    attempt.retry_state.set_result(current)
        except RetryError as e:
            if cancel.is_set():
                raise OperationCancelled(
                    f"Wait for operation {name} in {region} was cancelled",
                    operation=name,
                ) from e
            raise OperationTimeout(
                f"Operation {name} in {region} not DONE after {timeout}s",
                operation=name,
            ) from e
        except exceptions.GoogleAPICallError as e:
            raise ProviderRequestFailed(
                f"Failed to query operation {name} in {region}: {e}"
            ) from e

    errors = _operation_errors(current)
    if errors:
        raise OperationFailed(
            f"Operation {name} in {region} failed: {'; '.join(errors)}",
            operation=name,
            errors=errors,
        )
    return current
