"""Project configuration for taint-audit."""

from taint_audit.config.settings import (
    ConfigManager,
    ProjectConfig,
    ScanSettings,
    create_default_config,
    filter_by_baseline,
    load_baseline,
    save_baseline,
)

__all__ = [
    "ConfigManager",
    "ProjectConfig",
    "ScanSettings",
    "create_default_config",
    "filter_by_baseline",
    "load_baseline",
    "save_baseline",
]
