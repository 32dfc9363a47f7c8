"""
Utility functions for veritrace

Provides logging setup, file I/O helpers, and the exception hierarchy
"""

import json
import logging
from pathlib import Path
from typing import Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Configure logging for veritrace"""
    level = getattr(logging, log_level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# FILE I/O
# ═══════════════════════════════════════════════════════════════════

def read_json(file_path: str | Path) -> dict:
    """Read JSON file"""
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(data: dict, file_path: str | Path, indent: int = 2) -> None:
    """Write JSON file"""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class VeritraceError(Exception):
    """Base exception for veritrace"""
    pass


class ReconstructionError(VeritraceError):
    """Reconstruction of a single answer failed.

    Attributes:
        stage: Reconstruction stage that failed ("pattern", "keys", "explanation")
        path: Premise indices leading from the top-level answer to the failing one
        answer_index: Position of the top-level answer in its batch, once known
    """

    def __init__(
        self,
        message: str,
        stage: str = "",
        path: tuple[int, ...] = (),
        answer_index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.path = tuple(path)
        self.answer_index = answer_index

    def __str__(self) -> str:
        where = []
        if self.answer_index is not None:
            where.append(f"answer={self.answer_index}")
        if self.stage:
            where.append(f"stage={self.stage}")
        if self.path:
            where.append(f"path={'/'.join(str(i) for i in self.path)}")
        if not where:
            return self.message
        return f"{self.message} [{', '.join(where)}]"


class MissingPatternError(ReconstructionError):
    """Answer carries no pattern; the query was not run with explanations"""
    pass


class UnsupportedConceptError(ReconstructionError):
    """Key statements requested for a schema-level concept"""
    pass


class ExplanationDepthError(ReconstructionError):
    """Explanation tree deeper than the configured bound"""
    pass


class ScenarioError(VeritraceError):
    """Scenario file could not be loaded"""
    pass
