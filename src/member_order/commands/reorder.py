"""
Reordering command for ESTree JSON files
"""

import json
import logging
from pathlib import Path
from typing import Any

from ..core.backup_manager import BackupManager
from ..core.base_processor import BaseProcessor, ProcessingStatus, ProcessResult
from ..core.config import Config
from ..core.dependency_analyzer import DataDependencyMap
from ..core.nodes import is_node
from ..core.rewriter import DeclarationRewriter
from ..core.visit import visit

logger = logging.getLogger(__name__)


def load_tree(content: str) -> dict[str, Any]:
    """Parse a JSON document and check it holds a syntax node"""
    tree = json.loads(content)
    if not is_node(tree):
        raise ValueError("JSON document is not an ESTree node (missing 'type')")
    return tree


def dump_tree(tree: Any, indent: int | None = 2) -> str:
    return json.dumps(tree, indent=indent, ensure_ascii=False) + "\n"


class AstFileProcessor(BaseProcessor):
    """Reorders declaration members of a single JSON AST file"""

    def __init__(
        self,
        config: Config,
        backup_manager: BackupManager | None = None,
    ):
        super().__init__(config)
        self.backup_manager = backup_manager

    def can_process(self, file_path: Path) -> bool:
        return file_path.suffix in self.config.ordering.file_suffixes

    def rewrite(self, tree: Any) -> tuple[Any, DeclarationRewriter]:
        """Run the declaration rewriter over a tree"""
        rewriter = DeclarationRewriter(self.config.ordering)
        return visit(tree, rewriter), rewriter

    def process_file(
        self,
        file_path: Path,
        output_path: Path | None = None,
        **kwargs,
    ) -> ProcessResult:
        """
        Reorder one AST file

        Args:
            file_path: JSON AST file
            output_path: Where to write the result (defaults to file_path)

        Returns:
            ProcessResult; changes_applied counts reordered declarations
        """
        try:
            tree = load_tree(self.read_file(file_path))
        except (OSError, ValueError) as e:
            self.logger.error(f"Error processing {file_path}: {e}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.ERROR,
                error_message=str(e),
            )

        new_tree, rewriter = self.rewrite(tree)
        details = [
            {"declaration": kind, "dependencies": deps}
            for kind, deps in rewriter.dependency_maps
            if deps
        ]

        preview = self.config.dry_run or self.config.check
        if rewriter.reordered == 0 and (output_path is None or preview):
            self.logger.debug(f"No changes needed for {file_path}")
            return ProcessResult(
                file_path=file_path,
                status=ProcessingStatus.NO_CHANGES,
                changes_details=details,
            )

        result = ProcessResult(
            file_path=file_path,
            status=ProcessingStatus.SUCCESS,
            changes_applied=rewriter.reordered,
            changes_details=details,
        )

        if preview:
            logger.info(
                f"[DRY RUN] Would reorder {rewriter.reordered} declarations "
                f"in {file_path}"
            )
            return result

        target = output_path or file_path
        if self.backup_manager and target.exists():
            result.backup_path = self.backup_manager.backup_file(target)

        content = dump_tree(new_tree, self.config.ordering.indent)
        if not self.write_file(target, content):
            result.status = ProcessingStatus.ERROR
            result.error_message = f"Could not write {target}"
            return result

        logger.info(f"Reordered {rewriter.reordered} declarations in {target}")
        return result

    def analyze_file(self, file_path: Path) -> list[tuple[str, DataDependencyMap]]:
        """Return the closed dependency map of every declaration in a file"""
        tree = load_tree(self.read_file(file_path))
        _, rewriter = self.rewrite(tree)
        return rewriter.dependency_maps


class ReorderCommand:
    """Command handler for reordering files or directories"""

    def __init__(self, config: Config):
        """Initialize reorder command with configuration"""
        self.config = config
        self.backup_manager = None
        if config.backup.enabled and not (config.dry_run or config.check):
            self.backup_manager = BackupManager(
                backup_dir=config.backup.directory,
                compression=config.backup.compression,
                keep_sessions=config.backup.keep_sessions,
                session_description="reorder",
            )
        self.processor = AstFileProcessor(config, self.backup_manager)

    def collect_files(self, path: Path, recursive: bool = False) -> list[Path]:
        """
        Collect the AST files to process under a path

        Args:
            path: File or directory
            recursive: Descend into subdirectories

        Returns:
            Sorted list of files, the backup directory excluded
        """
        if path.is_file():
            return [path]

        backup_dir = Path(self.config.backup.directory).resolve()
        pattern = "**/*" if recursive else "*"
        files = []
        for candidate in path.glob(pattern):
            if not candidate.is_file() or not self.processor.can_process(candidate):
                continue
            if backup_dir in candidate.resolve().parents:
                logger.debug(f"Skipping backup file {candidate}")
                continue
            files.append(candidate)
        return sorted(files)

    def execute(
        self,
        path: Path,
        recursive: bool = False,
        output: Path | None = None,
    ) -> list[ProcessResult]:
        """
        Reorder every AST file under ``path``

        Args:
            path: File or directory to process
            recursive: Process directories recursively
            output: Output file, only valid when ``path`` is a file

        Returns:
            One ProcessResult per file
        """
        if output is not None and not path.is_file():
            raise ValueError("--output requires a single input file")

        files = self.collect_files(path, recursive)
        if not files:
            logger.warning(f"No AST files found under {path}")
            return []

        # Sessions start with the first backed up file
        try:
            if output is not None:
                results = [self.processor.process_file(path, output_path=output)]
            else:
                results = self.processor.process_batch(files)
        finally:
            if self.backup_manager and self.backup_manager.current_session:
                self.backup_manager.finalize_session()

        self._log_summary(results)
        return results

    def _log_summary(self, results: list[ProcessResult]) -> None:
        changed = sum(1 for r in results if r.status == ProcessingStatus.SUCCESS)
        errors = sum(1 for r in results if r.status == ProcessingStatus.ERROR)
        logger.info(
            f"Processed {len(results)} files: {changed} changed, {errors} errors"
        )
