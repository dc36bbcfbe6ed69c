# lambda_fleet_tool/apply.py
"""
Apply engine: submit planned configuration updates one function at a time
"""
import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .aws import error_message
from .aws.lambda_manager import LambdaManager
from .models import UpgradePlanItem, UpgradeResult, UpgradeStatus

logger = logging.getLogger(__name__)


class ItemState(str, Enum):
    """Non-terminal states of a plan item; terminal ones are UpgradeStatus"""

    PENDING = 'Pending'
    SUBMITTED = 'Submitted'
    POLLING = 'Polling'


class ApplyEngine:
    """
    Executes plan items strictly in order: each item is submitted and
    polled to a terminal status before the next one starts.
    """

    def __init__(
            self,
            lambda_mgr: LambdaManager,
            timeout: float = 60.0,
            initial_interval: float = 1.0,
            max_interval: float = 5.0,
            backoff: float = 1.5,
            sleep: Callable[[float], None] = time.sleep,
            clock: Callable[[], float] = time.monotonic
    ):
        self.lambda_mgr = lambda_mgr
        self.timeout = timeout
        self.initial_interval = initial_interval
        self.max_interval = max_interval
        self.backoff = backoff
        self.sleep = sleep
        self.clock = clock
        self.states: Dict[str, Union[ItemState, UpgradeStatus]] = {}

    def _set_state(self, name: str, state: Union[ItemState, UpgradeStatus]) -> None:
        logger.debug(f"{name}: {self.states.get(name, ItemState.PENDING).value} -> {state.value}")
        self.states[name] = state

    def submit(self, item: UpgradePlanItem) -> dict:
        """One update call carrying every change flagged on the item"""
        return self.lambda_mgr.update_function_configuration(
            item.name,
            runtime=item.to_runtime if item.change_runtime else None,
            layers=list(item.to_layers) if item.change_layers and item.to_layers is not None else None,
        )

    def wait_for_update(self, function_name: str) -> Tuple[UpgradeStatus, Optional[str]]:
        """
        Poll LastUpdateStatus until Successful/Failed or the timeout elapses.
        The interval grows by the backoff factor up to max_interval.
        """
        start = self.clock()
        interval = self.initial_interval

        while True:
            try:
                cfg = self.lambda_mgr.get_function_configuration(function_name)
            except Exception as e:
                return UpgradeStatus.FAILED, f"Status check failed: {error_message(e)}"

            status = cfg.get('LastUpdateStatus') or 'Unknown'
            if status == UpgradeStatus.SUCCESSFUL.value:
                return UpgradeStatus.SUCCESSFUL, None
            if status == UpgradeStatus.FAILED.value:
                return UpgradeStatus.FAILED, cfg.get('LastUpdateStatusReason') or 'Unknown reason'

            elapsed = self.clock() - start
            remaining = self.timeout - elapsed
            if remaining <= 0:
                return UpgradeStatus.TIMEOUT, f"No terminal update status after {elapsed:.0f}s"

            logger.debug(f"{function_name}: update status {status}, checking again in {interval:.1f}s")
            self.sleep(min(interval, remaining))
            interval = min(interval * self.backoff, self.max_interval)

    def apply_item(self, item: UpgradePlanItem) -> UpgradeResult:
        """Resolve one item to exactly one result; never raises"""
        started = self.clock()
        self.states[item.name] = ItemState.PENDING

        try:
            ack = self.submit(item)
        except Exception as e:
            reason = error_message(e)
            logger.debug(f"Update submission rejected for {item.name}: {reason}")
            self._set_state(item.name, UpgradeStatus.FAILED)
            return UpgradeResult(
                name=item.name,
                status=UpgradeStatus.FAILED,
                reason=reason,
                duration_seconds=self.clock() - started,
            )

        self._set_state(item.name, ItemState.SUBMITTED)
        self._set_state(item.name, ItemState.POLLING)
        status, reason = self.wait_for_update(item.name)
        self._set_state(item.name, status)

        return UpgradeResult(
            name=item.name,
            status=status,
            reason=reason,
            runtime=(ack or {}).get('Runtime'),
            duration_seconds=self.clock() - started,
        )

    def apply(
            self,
            items: Sequence[UpgradePlanItem],
            on_start: Optional[Callable[[UpgradePlanItem], None]] = None,
            on_result: Optional[Callable[[UpgradeResult], None]] = None
    ) -> List[UpgradeResult]:
        self.states = {}
        results: List[UpgradeResult] = []
        for item in items:
            if on_start:
                on_start(item)
            result = self.apply_item(item)
            results.append(result)
            if on_result:
                on_result(result)
        return results
