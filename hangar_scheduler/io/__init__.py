"""I/O utilities for model loading and CSV export."""

from .export_csv import export_inductions_csv, inductions_frame
from .model_loader import build_model, load_model

__all__ = [
    "build_model",
    "load_model",
    "export_inductions_csv",
    "inductions_frame",
]
