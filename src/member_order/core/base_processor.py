"""
Per-file processing results and the processor interface used by commands
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Outcome of processing one file"""

    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"
    NO_CHANGES = "no_changes"


STATUS_MARKS = {
    ProcessingStatus.SUCCESS: "✓",
    ProcessingStatus.ERROR: "✗",
    ProcessingStatus.SKIPPED: "⊝",
    ProcessingStatus.NO_CHANGES: "=",
}


@dataclass
class ProcessResult:
    """What happened to one file

    ``changes_applied`` counts the declarations whose members were reordered,
    ``changes_details`` holds one dependency map per declaration that has any.
    """

    file_path: Path
    status: ProcessingStatus
    changes_applied: int = 0
    changes_details: list[dict[str, Any]] = field(default_factory=list)
    error_message: str | None = None
    backup_path: Path | None = None

    def __str__(self) -> str:
        summaries = {
            ProcessingStatus.SUCCESS: f"{self.changes_applied} declarations reordered",
            ProcessingStatus.NO_CHANGES: "No changes needed",
            ProcessingStatus.SKIPPED: "Skipped",
        }
        summary = summaries.get(self.status, self.error_message)
        return f"{STATUS_MARKS[self.status]} {self.file_path.name}: {summary}"


class BaseProcessor(ABC):
    """Reads, rewrites and writes back the files a command selects"""

    def __init__(self, config: Any = None):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def can_process(self, file_path: Path) -> bool:
        """Whether ``file_path`` is handled by this processor"""

    @abstractmethod
    def process_file(self, file_path: Path, **kwargs) -> ProcessResult:
        """Process one file and report the outcome"""

    def read_file(self, file_path: Path) -> str:
        """Read a UTF-8 file, logging and re-raising OSError"""
        try:
            return file_path.read_text(encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Error reading {file_path}: {e}")
            raise

    def write_file(self, file_path: Path, content: str) -> bool:
        """Write a UTF-8 file, creating parent directories; False on failure"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            self.logger.error(f"Error writing {file_path}: {e}")
            return False
        return True

    def process_batch(self, file_paths: list[Path], **kwargs) -> list[ProcessResult]:
        """Process files in order, reporting unsupported ones as skipped"""
        results = []
        for file_path in file_paths:
            if not self.can_process(file_path):
                self.logger.debug(f"Skipping unsupported file {file_path}")
                results.append(
                    ProcessResult(
                        file_path=file_path,
                        status=ProcessingStatus.SKIPPED,
                        error_message="File type not supported by this processor",
                    )
                )
                continue
            results.append(self.process_file(file_path, **kwargs))
        return results
