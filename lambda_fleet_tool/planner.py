# lambda_fleet_tool/planner.py
"""
Selection and plan building for runtime upgrades
"""
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from .models import FunctionRecord, Selection, UpgradePlan, UpgradePlanItem

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[FunctionRecord]], Iterable[str]]


def parse_include(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated, comma separated name lists, dropping blanks and duplicates"""
    names: List[str] = []
    for value in values or []:
        for part in value.split(','):
            name = part.strip()
            if name and name not in names:
                names.append(name)
    return names


def select_functions(
        candidates: Sequence[FunctionRecord],
        include: Optional[Sequence[str]] = None,
        select_all: bool = False,
        chooser: Optional[Chooser] = None
) -> Selection:
    """
    Resolve which candidates to act on

    An explicit include list wins over select_all, which wins over the
    interactive chooser. Requested names that are not candidates are
    reported in Selection.missing. The chooser may raise OperatorCancelled.
    """
    candidate_names = [c.name for c in candidates]

    if include:
        requested = set(include)
        names = [n for n in candidate_names if n in requested]
        missing = [n for n in include if n not in candidate_names]
        return Selection(names=names, missing=missing)

    if select_all:
        return Selection(names=candidate_names)

    if chooser is None:
        raise ValueError("No selection mode: pass include, select_all or an interactive chooser")

    picked = set(chooser(candidates))
    return Selection(names=[n for n in candidate_names if n in picked])


def plan_item(record: FunctionRecord, target_runtime: str, layer_arn: Optional[str] = None) -> UpgradePlanItem:
    """Diff one function's current state against the desired state"""
    current_runtime = record.runtime or ''
    change_runtime = current_runtime.lower() != target_runtime.lower()

    to_layers = (layer_arn,) if layer_arn else None
    change_layers = to_layers is not None and tuple(record.layers) != to_layers

    return UpgradePlanItem(
        name=record.name,
        from_runtime=current_runtime,
        to_runtime=target_runtime,
        from_layers=tuple(record.layers),
        to_layers=to_layers,
        change_runtime=change_runtime,
        change_layers=change_layers,
    )


def build_plan(
        candidates: Sequence[FunctionRecord],
        selection: Selection,
        target_runtime: str,
        layer_arn: Optional[str] = None
) -> UpgradePlan:
    """
    Split selected candidates into to_upgrade and already_satisfied,
    keeping candidate order. Deterministic for identical inputs.
    """
    selected = set(selection.names)
    plan = UpgradePlan(target_runtime=target_runtime, skipped_names=list(selection.missing))

    for record in candidates:
        if record.name not in selected:
            continue
        item = plan_item(record, target_runtime, layer_arn)
        if item.needs_change:
            plan.to_upgrade.append(item)
        else:
            plan.already_satisfied.append(item)

    logger.debug(
        f"Plan: {len(plan.to_upgrade)} to upgrade, {len(plan.already_satisfied)} already satisfied, "
        f"{len(plan.skipped_names)} skipped")
    return plan
