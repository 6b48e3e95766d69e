"""
Reasoning Config Service

Manages the marker vocabulary and routing switches used to split
reasoning text out of streamed assistant replies.
"""
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..paths import config_defaults_dir, config_local_dir, ensure_local_file
from .think_tag_parser import DEFAULT_CLOSE_MARKER, DEFAULT_OPEN_MARKER, markers_overlap

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "reasoning_config.yaml"


@dataclass
class ReasoningConfig:
    """Configuration for reasoning extraction"""
    open_marker: str = DEFAULT_OPEN_MARKER
    close_marker: str = DEFAULT_CLOSE_MARKER
    fast_path_enabled: bool = True
    fallback_on_error: bool = True

    def markers_valid(self) -> bool:
        return (
            bool(self.open_marker)
            and bool(self.close_marker)
            and not markers_overlap(self.open_marker, self.close_marker)
        )


class ReasoningConfigService:
    """Service for managing reasoning extraction configuration"""

    def __init__(self, config_path: Optional[str] = None):
        self.defaults_path: Optional[Path] = None

        if config_path is None:
            self.defaults_path = config_defaults_dir() / CONFIG_FILE_NAME
            self.config_path = config_local_dir() / CONFIG_FILE_NAME
        else:
            self.config_path = Path(config_path)
        self._ensure_config_exists()
        self.config = self._load_config()

    def _ensure_config_exists(self) -> None:
        """Create default config file if it doesn't exist"""
        if not self.config_path.exists():
            initial_text = yaml.safe_dump(
                {'reasoning': asdict(ReasoningConfig())},
                allow_unicode=True,
                sort_keys=False,
            )
            ensure_local_file(
                local_path=self.config_path,
                defaults_path=self.defaults_path,
                initial_text=initial_text,
            )
            logger.info(f"Created default reasoning config at {self.config_path}")

    def _load_config(self) -> ReasoningConfig:
        """Load configuration from YAML file"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            config_data = data.get('reasoning') or {}
            config = ReasoningConfig(
                open_marker=str(config_data.get('open_marker', DEFAULT_OPEN_MARKER)),
                close_marker=str(config_data.get('close_marker', DEFAULT_CLOSE_MARKER)),
                fast_path_enabled=bool(config_data.get('fast_path_enabled', True)),
                fallback_on_error=bool(config_data.get('fallback_on_error', True)),
            )
        except Exception as e:
            logger.error(f"Failed to load reasoning config: {e}")
            return ReasoningConfig()

        if not config.markers_valid():
            logger.warning(
                f"Invalid reasoning markers {config.open_marker!r}/{config.close_marker!r} "
                f"in {self.config_path}, using defaults"
            )
            config.open_marker = DEFAULT_OPEN_MARKER
            config.close_marker = DEFAULT_CLOSE_MARKER
        return config

    def reload_config(self):
        """Reload configuration from file"""
        self.config = self._load_config()

    def save_config(self, updates: Dict[str, Any]):
        """Save updated configuration to file"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            if not isinstance(data.get('reasoning'), dict):
                data['reasoning'] = {}

            section = data['reasoning']
            for key, value in updates.items():
                if value is not None:
                    section[key] = value

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False)

            self.reload_config()
            logger.info("Reasoning config updated successfully")
        except Exception as e:
            logger.error(f"Failed to save reasoning config: {e}")
            raise
