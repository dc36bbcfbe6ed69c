# lambda_fleet_tool/inventory.py
"""
Inventory collection: current functions of a runtime family, newest activity first
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from dateutil.tz import tzutc

from .aws.lambda_manager import LambdaManager
from .aws.logs_manager import LogsManager
from .models import FunctionRecord, Inventory, LastInvocation
from .runtimes import RuntimeFamily, is_family
from .timeutil import format_time_ago

logger = logging.getLogger(__name__)


def sort_by_last_invocation(records: Sequence[FunctionRecord]) -> List[FunctionRecord]:
    """Newest invocation first, never/unknown last, ties keep their input order"""
    return sorted(
        records,
        key=lambda r: (r.last_invoked_at is None, -(r.last_invoked_at or 0)),
    )


class InventoryCollector:
    """Lists functions and enriches them with last invocation times"""

    def __init__(
            self,
            lambda_mgr: LambdaManager,
            logs_mgr: LogsManager,
            max_workers: int = 10,
            clock: Optional[Callable[[], datetime]] = None
    ):
        self.lambda_mgr = lambda_mgr
        self.logs_mgr = logs_mgr
        self.max_workers = max(1, max_workers)
        self.clock = clock or (lambda: datetime.now(tz=tzutc()))

    def lookup_last_invocation(self, function_name: str, now: Optional[datetime] = None) -> LastInvocation:
        """Never raises: a failed lookup degrades to 'unknown'"""
        try:
            timestamp = self.logs_mgr.latest_event_timestamp(function_name)
        except Exception as e:
            logger.debug(f"Last invocation lookup failed for {function_name}: {e}")
            return LastInvocation.unknown(error=str(e))

        if timestamp is None:
            return LastInvocation.never()
        return LastInvocation(display=format_time_ago(timestamp, now or self.clock()), timestamp=timestamp)

    def enrich(self, records: Sequence[FunctionRecord]) -> List[FunctionRecord]:
        """
        Fetch last invocation for every record concurrently and join the
        results back by function name. Output keeps the input order.
        """
        if not records:
            return []

        now = self.clock()
        # Build the logs client here, not inside the workers
        self.logs_mgr.client
        names = list(dict.fromkeys(r.name for r in records))
        workers = min(self.max_workers, len(names))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {name: executor.submit(self.lookup_last_invocation, name, now) for name in names}
            by_name: Dict[str, LastInvocation] = {name: future.result() for name, future in futures.items()}

        unknown = sum(1 for inv in by_name.values() if inv.error)
        if unknown:
            logger.warning(f"⚠️  Last invocation unknown for {unknown} function(s)")

        return [replace(r, last_invocation=by_name[r.name]) for r in records]

    def collect(self, family: RuntimeFamily) -> Inventory:
        """List the fleet, keep the family's candidates, enrich and sort them"""
        functions = self.lambda_mgr.list_functions()
        candidates = [f for f in functions if is_family(f.runtime, family)]
        logger.info(f"Found {len(functions)} functions, {len(candidates)} {family} functions")

        if candidates:
            logger.info("Fetching last invocation times...")
            candidates = sort_by_last_invocation(self.enrich(candidates))

        return Inventory(family=family, functions=functions, candidates=candidates)
