# lambda_fleet_tool/listing.py
"""
Function and layer listings
"""
import logging
from typing import List, Optional

from .errors import InvalidOptionError
from .inventory import InventoryCollector, sort_by_last_invocation
from .models import FunctionRecord
from .reporting import Reporter
from .runtimes import RuntimeFamily, derive_family, is_family

logger = logging.getLogger(__name__)

LISTABLE_FAMILIES = (RuntimeFamily.PYTHON, RuntimeFamily.NODEJS)


class FunctionLister:
    """Lists functions with their runtimes, layers and last invocation"""

    def __init__(self, collector: InventoryCollector, reporter: Optional[Reporter] = None):
        self.collector = collector
        self.reporter = reporter or Reporter()

    def list_functions(self, runtime_filter: Optional[str] = None) -> List[FunctionRecord]:
        """All functions, optionally those whose runtime contains runtime_filter"""
        functions = self.collector.lambda_mgr.list_functions()
        needle = (runtime_filter or '').strip().lower()
        matching = [f for f in functions if needle in (f.runtime or '').lower()] if needle else functions

        if needle:
            logger.info(f"✅ {len(functions)} total; {len(matching)} matching '{runtime_filter}'")
        else:
            logger.info(f"✅ {len(functions)} total")

        if not matching:
            logger.warning("⚠️  No functions found.")
            return []

        logger.info("Fetching last invocation times...")
        rows = sort_by_last_invocation(self.collector.enrich(matching))
        self.reporter.function_listing(rows)
        self.reporter.layer_usage(rows)
        return rows

    def list_functions_with_layers(self, runtime: Optional[str] = None) -> List[FunctionRecord]:
        """Functions of one family (python by default) that have at least one layer"""
        requested = (runtime or RuntimeFamily.PYTHON.value).strip()
        family = derive_family(requested)
        if family not in LISTABLE_FAMILIES:
            raise InvalidOptionError([f"Invalid runtime '{requested}'. Use 'python' or 'nodejs'."])

        functions = self.collector.lambda_mgr.list_functions()
        all_with_layers = [f for f in functions if f.layers]
        family_functions = [f for f in functions if is_family(f.runtime, family)]
        family_with_layers = [f for f in family_functions if f.layers]

        logger.info(
            f"✅ {len(functions)} total; {len(family_functions)} {family}; "
            f"{len(family_with_layers)} {family} with layers "
            f"(account-wide with layers: {len(all_with_layers)})")

        if not family_with_layers:
            logger.warning(f"⚠️  No functions with layers found for runtime '{family}'.")
            return []

        logger.info("Fetching last invocation times...")
        rows = sort_by_last_invocation(self.collector.enrich(family_with_layers))
        self.reporter.function_listing(rows)
        self.reporter.layer_usage(rows)
        return rows
