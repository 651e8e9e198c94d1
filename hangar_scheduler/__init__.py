"""Hangar scheduler: aircraft-to-bay feasibility, auto-scheduling and conflict analysis.

Modules:
- config: load and validate scheduler configuration (YAML or JSON)
- data_io: timestamp helpers and JSON contract conversion
- constraints: rule checkers (door fit, bay fit, contiguity, time overlap, ownership)
- services: effective dimensions, bay adjacency and utilisation
- engine: feasibility engine, search primitives, auto-scheduler, conflict detection
- validator: validation report and text summaries
- exporter: export model builder
- io: model snapshot loading and CSV export
- cli: command-line interface entrypoints
"""

from .config import SchedulerConfig, load_config
from .engine.feasibility import find_suitable_bays, validate_induction
from .engine.orchestrator import AnalysisResult, analyze, schedule
from .engine.search import find_suitable_bay_sets, find_suitable_doors
from .errors import ConfigError, HangarSchedulerError, ModelError, PrecedenceCycleError

__all__ = [
    "SchedulerConfig",
    "load_config",
    "AnalysisResult",
    "analyze",
    "schedule",
    "validate_induction",
    "find_suitable_doors",
    "find_suitable_bay_sets",
    "find_suitable_bays",
    "HangarSchedulerError",
    "ConfigError",
    "ModelError",
    "PrecedenceCycleError",
]
