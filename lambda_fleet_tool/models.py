# lambda_fleet_tool/models.py
"""
Data models for runtime upgrades
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .runtimes import RuntimeFamily

NEVER_INVOKED = 'never'
UNKNOWN_INVOCATION = 'unknown'


class Phase(str, Enum):
    """Where the upgrade orchestrator currently is"""

    COLLECTING = 'Collecting'
    PLANNING = 'Planning'
    CONFIRMING = 'Confirming'
    APPLYING = 'Applying'
    DONE = 'Done'


class UpgradeStatus(str, Enum):
    """Terminal outcome of one attempted plan item"""

    SUCCESSFUL = 'Successful'
    FAILED = 'Failed'
    TIMEOUT = 'Timeout'


@dataclass(frozen=True)
class LastInvocation:
    """Newest log event of a function, as display text plus epoch millis"""

    display: str
    timestamp: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def never(cls) -> 'LastInvocation':
        return cls(display=NEVER_INVOKED)

    @classmethod
    def unknown(cls, error: Optional[str] = None) -> 'LastInvocation':
        return cls(display=UNKNOWN_INVOCATION, error=error)


@dataclass(frozen=True)
class FunctionRecord:
    """Snapshot of one Lambda function's identity and configuration"""

    name: str
    runtime: str = ''
    layers: Tuple[str, ...] = ()
    last_invocation: Optional[LastInvocation] = None

    @property
    def last_invoked_at(self) -> Optional[int]:
        return self.last_invocation.timestamp if self.last_invocation else None

    @property
    def last_invoked_display(self) -> str:
        return self.last_invocation.display if self.last_invocation else UNKNOWN_INVOCATION


@dataclass
class Inventory:
    """Result of one inventory collection"""

    family: RuntimeFamily
    functions: List[FunctionRecord] = field(default_factory=list)
    candidates: List[FunctionRecord] = field(default_factory=list)


@dataclass
class Selection:
    """Names chosen for upgrade plus requested names that were not candidates"""

    names: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UpgradePlanItem:
    """Desired change for one selected function"""

    name: str
    from_runtime: str
    to_runtime: str
    from_layers: Tuple[str, ...] = ()
    to_layers: Optional[Tuple[str, ...]] = None
    change_runtime: bool = False
    change_layers: bool = False

    @property
    def needs_change(self) -> bool:
        return self.change_runtime or self.change_layers


@dataclass
class UpgradePlan:
    """Selected functions split into work to do and work already done"""

    target_runtime: str
    to_upgrade: List[UpgradePlanItem] = field(default_factory=list)
    already_satisfied: List[UpgradePlanItem] = field(default_factory=list)
    skipped_names: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_upgrade


@dataclass
class UpgradeResult:
    """Result of an upgrade operation"""

    name: str
    status: UpgradeStatus
    reason: Optional[str] = None
    runtime: Optional[str] = None
    duration_seconds: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status is UpgradeStatus.SUCCESSFUL


@dataclass
class UpgradeSummary:
    """Counts the operator and automation read after an upgrade run"""

    successful: int = 0
    failed: int = 0
    skipped: int = 0
    not_attempted: int = 0
    failures: List[UpgradeResult] = field(default_factory=list)

    @classmethod
    def from_results(
            cls,
            results: List[UpgradeResult],
            already_satisfied: int = 0,
            not_attempted: int = 0
    ) -> 'UpgradeSummary':
        failures = [r for r in results if not r.ok]
        return cls(
            successful=len(results) - len(failures),
            failed=len(failures),
            skipped=already_satisfied,
            not_attempted=not_attempted,
            failures=failures,
        )


@dataclass
class UpgradeReport:
    """Everything one upgrade run produced"""

    target_runtime: str
    family: Optional[RuntimeFamily] = None
    inventory: Optional[Inventory] = None
    selection: Optional[Selection] = None
    plan: Optional[UpgradePlan] = None
    results: List[UpgradeResult] = field(default_factory=list)
    summary: UpgradeSummary = field(default_factory=UpgradeSummary)
    dry_run: bool = False
