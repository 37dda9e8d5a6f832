"""
Config Manager

Main configuration manager with include system support.
Loads modular YAML files and builds the typed DotSwarmConfig.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from dotswarm.models.config import DotSwarmConfig
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

CONFIG_DIR = Path(__file__).parent.parent / "config"


class ConfigManager:
    """
    Main configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Falls back to factory_defaults.yaml when the main file cannot
    be loaded or does not validate.

    Example:
        manager = ConfigManager()
        config = manager.load()
        config.timing.capture_interval_ms   # 8000
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path, None] = None
    ):
        """
        Args:
            config_path: Main config file (default: packaged config/config.yaml)
            defaults_path: Factory defaults fallback (default: packaged config/factory_defaults.yaml)
        """
        self.config_path = Path(config_path) if config_path else CONFIG_DIR / "config.yaml"
        self.factory_defaults_path = Path(defaults_path) if defaults_path else CONFIG_DIR / "factory_defaults.yaml"
        self.data: Dict[str, Any] = {}
        self.config: Optional[DotSwarmConfig] = None
        self.used_defaults = False

    def load(self) -> DotSwarmConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, merge those files first, then the main file's own keys
        3. Build and validate DotSwarmConfig
        4. Fallback to factory defaults on any failure

        Raises:
            ValueError / OSError: factory defaults are unusable too
        """
        try:
            self.data = self._load_file(self.config_path)
            self.config = DotSwarmConfig.from_dict(self.data)
            self.used_defaults = False

        except (OSError, yaml.YAMLError, ValueError) as ex:
            log.error(f"Failed to load {self.config_path.name}", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            self.data = self._read_yaml(self.factory_defaults_path)
            self.config = DotSwarmConfig.from_dict(self.data)
            self.used_defaults = True

        log.info(
            "Configuration loaded",
            grid=str(self.config.grid.resolution),
            capture_interval_ms=self.config.timing.capture_interval_ms,
            source=self.factory_defaults_path.name if self.used_defaults else self.config_path.name
        )
        return self.config

    def _load_file(self, path: Path) -> Dict[str, Any]:
        main_config = self._read_yaml(path)

        if 'include' not in main_config:
            log.info("Using monolithic configuration")
            return main_config

        log.info("Using include-based configuration")
        include_list = main_config.pop('include') or []
        if not isinstance(include_list, list) or not all(isinstance(name, str) for name in include_list):
            raise ValueError(f"{path.name}: 'include' must be a list of file names")
        merged = self._load_with_includes(include_list, path.parent)
        merged.update(main_config)
        return merged

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list (later files win)
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            file_data = self._read_yaml(config_dir / filename)
            if file_data:
                merged.update(file_data)
                log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.debug("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data
