"""
Unified configuration system for member-order
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

TRUTHY = ["true", "1", "yes"]


@dataclass
class OrderingConfig:
    """Configuration for member ordering"""

    dependency_order: bool = True  # Place members read through `this` first
    inject_first: bool = False  # Tie breaker: `x = inject(...)` fields first
    readonly_first: bool = False  # Tie breaker: readonly fields first

    # JSON output
    indent: int | None = 2
    file_suffixes: list[str] = field(default_factory=lambda: [".json"])


@dataclass
class BackupConfig:
    """Configuration for backup operations"""

    enabled: bool = True
    directory: str = ".backups"
    compression: bool = True
    keep_sessions: int = 10


@dataclass
class Config:
    """Main configuration class for member-order"""

    # General settings
    dry_run: bool = False
    check: bool = False
    verbose: bool = False
    quiet: bool = False

    # Sub-configurations
    ordering: OrderingConfig = field(default_factory=OrderingConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)

    # File paths
    config_file: str | None = None

    @classmethod
    def from_file(cls, filepath: Path) -> "Config":
        """Load configuration from YAML or JSON file"""
        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return cls()

        try:
            with open(filepath, "r") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif filepath.suffix == ".json":
                    data = json.load(f)
                else:
                    logger.error(f"Unsupported config file format: {filepath.suffix}")
                    return cls()

            config = cls._from_dict(data or {})
            config.config_file = str(filepath)
            return config
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file: {e}")
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config instance from dictionary"""
        config = cls()

        # Load general settings
        for key in ["dry_run", "check", "verbose", "quiet"]:
            if key in data:
                setattr(config, key, data[key])

        # Load sub-configurations
        if "ordering" in data:
            config.ordering = OrderingConfig(**data["ordering"])
        if "backup" in data:
            config.backup = BackupConfig(**data["backup"])

        return config

    @classmethod
    def load_hierarchy(cls, project_dir: Path | None = None) -> "Config":
        """Load configuration from hierarchy: global -> project -> env vars"""
        config = cls()

        # 1. Load global config
        global_config = Path.home() / ".member-order" / "config.yaml"
        if global_config.exists():
            config = cls.from_file(global_config)
            logger.debug(f"Loaded global config from {global_config}")

        # 2. Load project config
        if project_dir:
            project_config = project_dir / ".member-order.yaml"
            if project_config.exists():
                project_data = cls.from_file(project_config)
                config.merge(project_data)
                logger.debug(f"Loaded project config from {project_config}")

        # 3. Apply environment variables
        config.apply_env_vars()

        return config

    def merge(self, other: "Config") -> None:
        """Merge another config into this one (other takes precedence)"""
        if other.config_file:
            self.config_file = other.config_file

        # Merge boolean flags (only if explicitly set to True)
        for flag in ["dry_run", "check", "verbose", "quiet"]:
            if getattr(other, flag):
                setattr(self, flag, True)

        # Merge sub-configurations
        self._merge_dataclass(self.ordering, other.ordering)
        self._merge_dataclass(self.backup, other.backup)

    def _merge_dataclass(self, target: Any, source: Any) -> None:
        """Merge source dataclass into target"""
        for field_name in source.__dataclass_fields__:
            source_value = getattr(source, field_name)
            if source_value != getattr(target.__class__(), field_name):
                setattr(target, field_name, source_value)

    def apply_env_vars(self) -> None:
        """Apply environment variables to configuration"""
        # MEMBER_ORDER_DRY_RUN
        if os.environ.get("MEMBER_ORDER_DRY_RUN", "").lower() in TRUTHY:
            self.dry_run = True

        # MEMBER_ORDER_VERBOSE
        if os.environ.get("MEMBER_ORDER_VERBOSE", "").lower() in TRUTHY:
            self.verbose = True

        # MEMBER_ORDER_NO_BACKUP
        if os.environ.get("MEMBER_ORDER_NO_BACKUP", "").lower() in TRUTHY:
            self.backup.enabled = False

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.ordering.indent is not None and self.ordering.indent < 0:
            errors.append(f"Invalid indent: {self.ordering.indent}")

        for suffix in self.ordering.file_suffixes:
            if not suffix.startswith("."):
                errors.append(f"File suffix must start with a dot: {suffix}")

        if self.backup.keep_sessions < 1:
            errors.append("Backup keep_sessions must be at least 1")

        if self.verbose and self.quiet:
            errors.append("verbose and quiet are mutually exclusive")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "dry_run": self.dry_run,
            "check": self.check,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "ordering": asdict(self.ordering),
            "backup": asdict(self.backup),
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to file"""
        data = self.to_dict()

        if filepath.suffix not in [".yaml", ".yml", ".json"]:
            raise ValueError(f"Unsupported config file format: {filepath.suffix}")

        with open(filepath, "w") as f:
            if filepath.suffix == ".json":
                json.dump(data, f, indent=2)
            else:
                yaml.safe_dump(data, f, default_flow_style=False)
