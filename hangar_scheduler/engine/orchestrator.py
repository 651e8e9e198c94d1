"""Orchestrator - single entry point running scheduling, validation and export."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from hangar_scheduler.config import SchedulerConfig
from hangar_scheduler.domain.models import AirfieldModel
from hangar_scheduler.domain.results import (
    Conflict,
    ExportModel,
    ScheduledInduction,
    ScheduleResult,
    ValidationReport,
)
from hangar_scheduler.exporter import build_export_model
from hangar_scheduler.validator import build_validation_report

from .auto_scheduler import AutoScheduler
from .conflicts import detect_conflicts, manual_placements

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    report: ValidationReport
    export_model: ExportModel
    schedule_result: Optional[ScheduleResult]
    # combined manual + scheduled conflicts
    conflicts: List[Conflict]
    placements: List[ScheduledInduction] = field(default_factory=list)
    model: Optional[AirfieldModel] = None


class Orchestrator:
    """
    Orchestrator runs one complete analysis of a model snapshot.

    The auto-scheduler runs first (only when auto-inductions exist), then the
    validation report and export model are built from its result, and finally
    conflicts are re-detected over the combined manual + scheduled set.
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()

    def analyze(self, model: AirfieldModel) -> AnalysisResult:
        """
        Analyze a model.

        Args:
            model: Reference-resolved airfield model

        Returns:
            AnalysisResult

        Raises:
            PrecedenceCycleError: If auto-induction precedence forms a cycle
        """
        logger.info(
            "Analyzing airfield %s: %d manual, %d auto inductions",
            model.name,
            len(model.inductions),
            len(model.auto_inductions),
        )

        # 1. Auto-schedule
        schedule_result: Optional[ScheduleResult] = None
        if model.auto_inductions:
            schedule_result = AutoScheduler(self.config).schedule(model)
            logger.info(
                "Scheduled: %d, unscheduled: %d",
                len(schedule_result.scheduled),
                len(schedule_result.unscheduled),
            )
            for u in schedule_result.unscheduled:
                reasons = schedule_result.reasons_for(u.id)
                logger.info("  - %s: %s", u.id, ", ".join(r.rule_id for r in reasons))

        # 2. Validation report
        report = build_validation_report(model, schedule_result)
        logger.info(
            "Violations: %d (errors=%d, warnings=%d)",
            report.summary.total_violations,
            report.summary.by_severity.get("errors", 0),
            report.summary.by_severity.get("warnings", 0),
        )

        # 3. Export model
        export_model = build_export_model(model, schedule_result)

        # 4. Combined conflict check
        placements = manual_placements(model.inductions)
        if schedule_result is not None:
            placements.extend(schedule_result.scheduled)
        conflicts = detect_conflicts(placements)
        if conflicts:
            logger.warning("Combined schedule has %d conflicts", len(conflicts))

        return AnalysisResult(
            report=report,
            export_model=export_model,
            schedule_result=schedule_result,
            conflicts=conflicts,
            placements=placements,
            model=model,
        )


def analyze(model: AirfieldModel, config: Optional[SchedulerConfig] = None) -> AnalysisResult:
    return Orchestrator(config).analyze(model)


def schedule(model: AirfieldModel, config: Optional[SchedulerConfig] = None) -> ScheduleResult:
    return AutoScheduler(config).schedule(model)
