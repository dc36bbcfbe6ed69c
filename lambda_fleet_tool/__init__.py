# lambda_fleet_tool/__init__.py
"""
AWS Lambda fleet tooling: runtime upgrades, listings and code download
"""

__version__ = "1.0.0"

from .apply import ApplyEngine
from .config import ToolConfig, UpgradeConfig
from .errors import (
    AuthorizationError,
    InvalidRuntimeFormat,
    LambdaToolError,
    OperatorCancelled,
    QueryFailure,
    UnsupportedRuntimeFamily,
    ValidationError,
)
from .inventory import InventoryCollector
from .models import FunctionRecord, UpgradePlan, UpgradePlanItem, UpgradeResult, UpgradeStatus
from .planner import build_plan, select_functions
from .runtimes import RuntimeFamily, derive_family, validate_target_runtime
from .upgrader import RuntimeUpgrader

__all__ = [
    'ApplyEngine',
    'ToolConfig',
    'UpgradeConfig',
    'AuthorizationError',
    'InvalidRuntimeFormat',
    'LambdaToolError',
    'OperatorCancelled',
    'QueryFailure',
    'UnsupportedRuntimeFamily',
    'ValidationError',
    'InventoryCollector',
    'FunctionRecord',
    'UpgradePlan',
    'UpgradePlanItem',
    'UpgradeResult',
    'UpgradeStatus',
    'build_plan',
    'select_functions',
    'RuntimeFamily',
    'derive_family',
    'validate_target_runtime',
    'RuntimeUpgrader',
]
