"""
Backup sessions for AST files rewritten in place
"""

import json
import logging
import shutil
import tarfile
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

METADATA_FILE = "session_metadata.json"
SESSION_PREFIX = "session_"


@dataclass
class BackupSession:
    """Information about a backup session"""

    session_id: str
    timestamp: str
    directory: Path
    files_backed_up: list[str] = field(default_factory=list)
    total_size: int = 0
    compressed: bool = False


def relative_backup_path(file_path: Path) -> Path:
    """Mirror a file path inside a session directory"""
    if file_path.is_absolute():
        return Path(*file_path.parts[1:])
    return file_path


class BackupManager:
    """Keeps a copy of every file before it is overwritten"""

    def __init__(
        self,
        backup_dir: str = ".backups",
        compression: bool = False,
        keep_sessions: int = 10,
        session_description: str | None = None,
    ):
        """
        Args:
            backup_dir: Root directory of all sessions
            compression: Archive finalized sessions as tar.gz
            keep_sessions: Number of most recent sessions kept on finalize
            session_description: Suffix of sessions started on demand
        """
        self.backup_dir = Path(backup_dir)
        self.compression = compression
        self.keep_sessions = keep_sessions
        self.session_description = session_description
        self.current_session: BackupSession | None = None
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def start_session(self, description: str | None = None) -> Path:
        """Start a new backup session"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        session_id = f"{SESSION_PREFIX}{timestamp}"
        if description:
            session_id = f"{session_id}_{description}"
        session_dir = self.backup_dir / session_id
        session_dir.mkdir(parents=True, exist_ok=True)
        self.current_session = BackupSession(
            session_id=session_id, timestamp=timestamp, directory=session_dir
        )
        logger.info(f"Started backup session: {session_id}")
        return session_dir

    def backup_file(self, file_path: Path) -> Path | None:
        """Copy a file into the current session, starting one if needed"""
        if not self.current_session:
            self.start_session(self.session_description)

        if not file_path.exists():
            logger.warning(f"File does not exist: {file_path}")
            return None

        backup_path = self.current_session.directory / relative_backup_path(file_path)
        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            logger.error(f"Error backing up {file_path}: {e}")
            return None

        self.current_session.files_backed_up.append(str(file_path))
        self.current_session.total_size += file_path.stat().st_size
        logger.debug(f"Backed up {file_path} to {backup_path}")
        return backup_path

    def restore_file(
        self,
        original_path: Path,
        backup_path: Path | None = None,
    ) -> bool:
        """Restore a file from an explicit backup or from the current session"""
        if backup_path is None and self.current_session:
            backup_path = self.current_session.directory / relative_backup_path(
                original_path
            )

        if backup_path is None or not backup_path.exists():
            logger.warning(f"No backup found for {original_path}")
            return False

        try:
            shutil.copy2(backup_path, original_path)
        except OSError as e:
            logger.error(f"Error restoring {original_path}: {e}")
            return False

        logger.info(f"Restored {original_path} from {backup_path}")
        return True

    def finalize_session(self) -> Path | None:
        """Write session metadata, compress if configured and prune old sessions"""
        if not self.current_session:
            logger.warning("No active backup session")
            return None

        session = self.current_session
        try:
            with open(session.directory / METADATA_FILE, "w") as f:
                json.dump(asdict(session), f, indent=2, default=str)

            result = session.directory
            if self.compression:
                archive_path = self.backup_dir / f"{session.session_id}.tar.gz"
                with tarfile.open(archive_path, "w:gz") as tar:
                    tar.add(session.directory, arcname=session.session_id)
                shutil.rmtree(session.directory)
                session.compressed = True
                logger.info(f"Compressed backup session to {archive_path}")
                result = archive_path

            self.prune_sessions()
        except (OSError, tarfile.TarError) as e:
            logger.error(f"Error finalizing backup session: {e}")
            return None

        logger.info(f"Finalized backup session: {session.session_id}")
        self.current_session = None
        return result

    def _session_entries(self) -> list[Path]:
        return [
            item
            for item in self.backup_dir.iterdir()
            if item.name.startswith(SESSION_PREFIX)
            and (item.is_dir() or item.name.endswith(".tar.gz"))
        ]

    def prune_sessions(self) -> int:
        """Remove sessions beyond the keep_sessions most recent ones

        Returns:
            Number of sessions removed
        """
        # Session names start with their timestamp
        sessions = sorted(self._session_entries(), key=lambda x: x.name, reverse=True)
        stale = sessions[self.keep_sessions :]
        for session in stale:
            if session.is_dir():
                shutil.rmtree(session)
            else:
                session.unlink()
            logger.debug(f"Removed old backup: {session}")
        return len(stale)

    def list_sessions(self) -> list[dict[str, Any]]:
        """List all backup sessions, most recent first"""
        sessions = []

        for item in self._session_entries():
            modified = datetime.fromtimestamp(item.stat().st_mtime).isoformat()
            if item.is_dir():
                metadata_file = item / METADATA_FILE
                if metadata_file.exists():
                    with open(metadata_file, "r") as f:
                        sessions.append(json.load(f))
                else:
                    sessions.append(
                        {
                            "session_id": item.name,
                            "directory": str(item),
                            "timestamp": modified,
                        }
                    )
            else:
                sessions.append(
                    {
                        "session_id": item.name.removesuffix(".tar.gz"),
                        "archive": str(item),
                        "compressed": True,
                        "timestamp": modified,
                    }
                )

        return sorted(sessions, key=lambda x: x.get("session_id", ""), reverse=True)

    def restore_session(self, session_id: str) -> bool:
        """Restore every file recorded in a backup session"""
        session_path = self.backup_dir / session_id
        archive_path = self.backup_dir / f"{session_id}.tar.gz"
        extracted = False

        try:
            if not session_path.exists() and archive_path.exists():
                with tarfile.open(archive_path, "r:gz") as tar:
                    tar.extractall(self.backup_dir, filter="data")
                extracted = True

            if not session_path.exists():
                logger.error(f"Backup session not found: {session_id}")
                return False

            metadata_file = session_path / METADATA_FILE
            if not metadata_file.exists():
                logger.error(f"Backup session has no metadata: {session_id}")
                return False

            with open(metadata_file, "r") as f:
                metadata = json.load(f)

            for file_path in metadata.get("files_backed_up", []):
                original = Path(file_path)
                backup = session_path / relative_backup_path(original)
                if backup.exists():
                    original.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(backup, original)
                    logger.info(f"Restored: {original}")

            return True

        except (OSError, ValueError, tarfile.TarError) as e:
            logger.error(f"Error restoring session {session_id}: {e}")
            return False

        finally:
            if extracted and session_path.exists():
                shutil.rmtree(session_path)
