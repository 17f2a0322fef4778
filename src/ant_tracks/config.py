import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TrackerConfig:
    """Settings for opening a trajectory database."""

    database_path: Path
    link_interactions: bool = True
    log_level: str = "INFO"

    def to_json(self, base: Optional[Path] = None) -> dict:
        """Serialize to a JSON-compatible dictionary, relative to ``base`` if given."""
        db_path = self.database_path
        if base is not None:
            try:
                db_path = db_path.relative_to(base)
            except ValueError:
                pass
        return {
            "database_path": str(db_path),
            "link_interactions": self.link_interactions,
            "log_level": self.log_level,
        }

    @staticmethod
    def from_json(config_path: Path) -> "TrackerConfig":
        """Load configuration from disk. Relative paths resolve against the file's folder."""
        data = json.loads(Path(config_path).read_text(encoding="utf-8"))
        if "database_path" not in data:
            raise ValueError(f"{config_path}: missing 'database_path'")
        db_path = Path(data["database_path"])
        if not db_path.is_absolute():
            db_path = (Path(config_path).parent / db_path).resolve()
        level = str(data.get("log_level", "INFO")).upper()
        if level not in LOG_LEVELS:
            logger.warning(f"Unknown log level {level!r} in {config_path}, using INFO")
            level = "INFO"
        return TrackerConfig(
            database_path=db_path,
            link_interactions=bool(data.get("link_interactions", True)),
            log_level=level,
        )

    def save(self, config_path: Path) -> None:
        config_path = Path(config_path)
        config_path.write_text(
            json.dumps(self.to_json(config_path.parent.resolve()), indent=2),
            encoding="utf-8",
        )


def load_config(config_path: Union[str, Path]) -> TrackerConfig:
    return TrackerConfig.from_json(Path(config_path))
