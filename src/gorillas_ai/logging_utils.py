"""Logging setup and one-line run summaries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def configure_logging(level: str = "INFO") -> None:
    """Configure process-wide logging once."""

    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def get_torch_device(prefer_gpu: bool = False):
    import torch

    if prefer_gpu and torch.cuda.is_available():
        return torch.device("cuda")
    return torch.device("cpu")


def format_display_path(path_value: str | Path) -> str:
    """Show paths relative to the working directory or project root when possible."""
    path_obj = Path(path_value)
    if not path_obj.is_absolute():
        return str(path_obj)

    for base in (Path.cwd(), PROJECT_ROOT):
        try:
            return str(path_obj.relative_to(base))
        except ValueError:
            continue
    return str(path_obj)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    if isinstance(value, float):
        return f"{value:.3f}"
    if isinstance(value, Path):
        return format_display_path(value)
    return str(value)


def _mode_label(mode: str) -> str:
    words = mode.replace("-", " ").split()
    return " ".join("AI" if word.lower() == "ai" else word.title() for word in words)


def log_key_values(logger_name: str, values: dict[str, Any]) -> None:
    """Log ``key=value`` pairs on one tab-separated line, skipping ``None`` values."""
    segments = [f"{key}={_format_value(value)}" for key, value in values.items() if value is not None]
    logging.getLogger(logger_name).info("\t".join(segments))


def log_run_context(mode: str, context: dict[str, Any]) -> None:
    segments = [_mode_label(mode)]
    for key, value in context.items():
        if value is not None:
            segments.append(f"{key.replace('_', ' ').title()}: {_format_value(value)}")
    logging.getLogger("gorillas_ai.run").info("\t".join(segments))
