# lambda_fleet_tool/reporting.py
"""
Operator-facing output for inventories, plans and upgrade results
"""
import json
import logging
import os
from collections import Counter
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import List, Sequence, Tuple

from .errors import LambdaToolError, ValidationError
from .models import (
    FunctionRecord,
    Inventory,
    Phase,
    UpgradePlan,
    UpgradePlanItem,
    UpgradeReport,
    UpgradeResult,
    UpgradeSummary,
)
from .runtimes import RuntimeFamily

logger = logging.getLogger(__name__)

PHASE_MESSAGES = {
    Phase.COLLECTING: "🔎 Loading Lambda functions...",
    Phase.PLANNING: "📋 Planning updates...",
    Phase.CONFIRMING: "❓ Waiting for confirmation...",
    Phase.APPLYING: "🚀 Applying updates...",
}


def format_layers(layers: Sequence[str], empty: str = 'none') -> str:
    return ', '.join(layers) if layers else empty


def function_label(record: FunctionRecord) -> str:
    """name (last: <when>, <runtime>[, layers: ...])"""
    layers = f", layers: {format_layers(record.layers)}" if record.layers else ''
    return f"{record.name} (last: {record.last_invoked_display}, {record.runtime or 'unknown'}{layers})"


def describe_changes(item: UpgradePlanItem) -> str:
    parts = []
    if item.change_runtime:
        parts.append(f"{item.from_runtime or 'unknown'} -> {item.to_runtime}")
    if item.change_layers:
        to_layers = item.to_layers if item.to_layers is not None else item.from_layers
        parts.append(f"layers: {format_layers(item.from_layers)} -> {format_layers(to_layers)}")
    return '; '.join(parts)


def count_layer_usage(records: Sequence[FunctionRecord]) -> List[Tuple[str, int]]:
    """Unique layer ARNs with the number of functions using each, most used first"""
    counts = Counter(arn for r in records for arn in r.layers)
    return sorted(counts.items(), key=lambda kv: -kv[1])


class Reporter:
    """Renders core results through the logger"""

    def phase_changed(self, phase: Phase) -> None:
        message = PHASE_MESSAGES.get(phase)
        if message:
            logger.info(message)

    def inventory(self, inventory: Inventory) -> None:
        logger.info(
            f"✅ Found {len(inventory.functions)} functions, "
            f"{len(inventory.candidates)} {inventory.family} functions")

    def no_candidates(self, family: RuntimeFamily) -> None:
        logger.warning(f"⚠️  No {family} functions found to upgrade in this account/region.")

    def missing_names(self, names: Sequence[str], family: RuntimeFamily) -> None:
        if names:
            logger.warning(f"⚠️  Skipping unknown or non-{family} functions: {', '.join(names)}")

    def nothing_selected(self) -> None:
        logger.warning("⚠️  No functions selected. Nothing to upgrade.")

    def plan(self, plan: UpgradePlan) -> None:
        if plan.already_satisfied:
            logger.info("")
            logger.info("⏭️  Skipping functions already at target state:")
            for item in plan.already_satisfied:
                layers = f", layers: {format_layers(item.from_layers)}" if item.from_layers else ''
                logger.info(f"  - {item.name} ({item.from_runtime}{layers})")

        if plan.is_empty:
            logger.info("✅ All selected functions already at the desired runtime/layers. Nothing to change.")
            return

        logger.info("")
        logger.info("📋 Planned updates:")
        for item in plan.to_upgrade:
            logger.info(f"  - {item.name} ({describe_changes(item)})")

    def dry_run(self, plan: UpgradePlan) -> None:
        logger.info(f"[DRY-RUN] Would update {len(plan.to_upgrade)} function(s); no changes made")

    def item_started(self, item: UpgradePlanItem) -> None:
        logger.info("")
        logger.info(f"⚡ Updating {item.name} ({describe_changes(item)}) ...")

    def result(self, result: UpgradeResult) -> None:
        if result.ok:
            logger.info(f"✅ {result.name} -> {result.runtime or 'updated'} ({result.status.value})")
            return
        if result.reason:
            logger.error(f"  ↳ Reason: {result.reason}")
        logger.error(f"❌ {result.name} ({result.status.value})")

    def summary(self, summary: UpgradeSummary) -> None:
        logger.info("")
        logger.info("=" * 60)
        logger.info("📊 Summary:")
        logger.info(f"  ✅ Success: {summary.successful}")
        logger.info(f"  ❌ Failed: {summary.failed}")
        logger.info(f"  ⏭️  Skipped (already on target): {summary.skipped}")
        if summary.not_attempted:
            logger.info(f"  💤 Not attempted (dry run): {summary.not_attempted}")
        for failure in summary.failures:
            logger.info(f"   - {failure.name}: {failure.status.value}: {failure.reason or 'Unknown reason'}")
        logger.info("=" * 60)

    def function_listing(self, records: Sequence[FunctionRecord]) -> None:
        logger.info("")
        for r in records:
            logger.info(f"• {r.name} ({r.runtime or 'unknown'})")
            logger.info(f"  Layers: {format_layers(r.layers)}")
            logger.info(f"  Last Invoked: {r.last_invoked_display}")
            logger.info("")

    def layer_usage(self, records: Sequence[FunctionRecord]) -> None:
        usage = count_layer_usage(records)
        logger.info(f"Unique layers: {len(usage)}")
        for arn, count in usage:
            logger.info(f"  - {arn}  ({count} function{'' if count == 1 else 's'})")

    def check_report_path(self, path: Path) -> None:
        """Refuse a report path whose directory is missing or read-only"""
        path = Path(path)
        parent = path.parent
        if path.is_dir():
            raise ValidationError(f"Report file '{path}' is a directory")
        if not parent.is_dir():
            raise ValidationError(f"Report directory '{parent}' does not exist")
        if not os.access(parent, os.W_OK):
            raise ValidationError(f"Report directory '{parent}' is not writable")

    def write_report_file(self, report: UpgradeReport, path: Path) -> Path:
        """Export the run as JSON for automation"""
        document = {
            'generated_at': datetime.now().isoformat(),
            'target_runtime': report.target_runtime,
            'family': report.family.value if report.family else None,
            'dry_run': report.dry_run,
            'summary': {
                'successful': report.summary.successful,
                'failed': report.summary.failed,
                'skipped': report.summary.skipped,
                'not_attempted': report.summary.not_attempted,
            },
            'skipped_names': report.plan.skipped_names if report.plan else [],
            'to_upgrade': [asdict(i) for i in report.plan.to_upgrade] if report.plan else [],
            'already_satisfied': [asdict(i) for i in report.plan.already_satisfied] if report.plan else [],
            'results': [
                {
                    'name': r.name,
                    'status': r.status.value,
                    'reason': r.reason,
                    'runtime': r.runtime,
                    'duration_seconds': r.duration_seconds,
                }
                for r in report.results
            ],
        }
        path = Path(path)
        try:
            with open(path, 'w') as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            raise LambdaToolError(f"Failed to write report file '{path}': {e}") from e
        logger.info(f"📄 Report written to: {path}")
        return path
