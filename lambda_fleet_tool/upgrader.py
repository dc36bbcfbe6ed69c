# lambda_fleet_tool/upgrader.py
"""
Runtime upgrade orchestrator: validate, collect, plan, confirm, apply
"""
import logging
from typing import Callable, Optional

from .apply import ApplyEngine
from .config import UpgradeConfig
from .errors import OperatorCancelled
from .inventory import InventoryCollector
from .models import Phase, UpgradeReport, UpgradeSummary
from .planner import build_plan, select_functions
from .prompts import ConsolePrompter
from .reporting import Reporter
from .runtimes import validate_target_runtime

logger = logging.getLogger(__name__)


class RuntimeUpgrader:
    """
    Upgrades the runtime (and optionally the layer) of a batch of Lambda
    functions. Stages run strictly forward; only validation, authorization
    and inventory failures raise. Per-function failures end up in the
    report's results and summary.
    """

    def __init__(
            self,
            config: UpgradeConfig,
            collector: InventoryCollector,
            engine: ApplyEngine,
            prompter: Optional[ConsolePrompter] = None,
            reporter: Optional[Reporter] = None,
            preflight: Optional[Callable[[], object]] = None
    ):
        self.config = config
        self.collector = collector
        self.engine = engine
        self.prompter = prompter or ConsolePrompter()
        self.reporter = reporter or Reporter()
        self.preflight = preflight
        self.phase: Optional[Phase] = None

    def _enter(self, phase: Phase) -> None:
        self.phase = phase
        self.reporter.phase_changed(phase)

    def _choose(self, candidates):
        return self.prompter.choose_functions(candidates, self.config.target_runtime)

    def _finish(self, report: UpgradeReport) -> UpgradeReport:
        self._enter(Phase.DONE)
        if self.config.report_file:
            self.reporter.write_report_file(report, self.config.report_file)
        return report

    def run(self) -> UpgradeReport:
        config = self.config
        report = UpgradeReport(target_runtime=config.target_runtime, dry_run=config.dry_run)

        # Fail fast on a bad target before touching AWS
        report.family = family = validate_target_runtime(config.target_runtime)
        if config.report_file:
            self.reporter.check_report_path(config.report_file)
        if self.preflight:
            self.preflight()

        self._enter(Phase.COLLECTING)
        report.inventory = inventory = self.collector.collect(family)
        self.reporter.inventory(inventory)
        if not inventory.candidates:
            self.reporter.no_candidates(family)
            return self._finish(report)

        self._enter(Phase.PLANNING)
        report.selection = selection = select_functions(
            inventory.candidates,
            include=config.include,
            select_all=config.select_all,
            chooser=self._choose,
        )
        self.reporter.missing_names(selection.missing, family)
        report.plan = plan = build_plan(inventory.candidates, selection, config.target_runtime, config.layer_arn)

        if not selection.names:
            self.reporter.nothing_selected()
            return self._finish(report)

        self.reporter.plan(plan)
        report.summary = UpgradeSummary(skipped=len(plan.already_satisfied))
        if plan.is_empty:
            return self._finish(report)

        if config.dry_run:
            self.reporter.dry_run(plan)
            report.summary.not_attempted = len(plan.to_upgrade)
            self.reporter.summary(report.summary)
            return self._finish(report)

        if not config.assume_yes:
            self._enter(Phase.CONFIRMING)
            if not self.prompter.confirm("Proceed with these updates?"):
                raise OperatorCancelled("Aborted.")

        self._enter(Phase.APPLYING)
        report.results = self.engine.apply(
            plan.to_upgrade,
            on_start=self.reporter.item_started,
            on_result=self.reporter.result,
        )
        report.summary = UpgradeSummary.from_results(report.results, already_satisfied=len(plan.already_satisfied))
        self.reporter.summary(report.summary)

        if report.summary.failed:
            logger.warning(f"⚠️  {report.summary.failed} function(s) were not upgraded")
        return self._finish(report)
