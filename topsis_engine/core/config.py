"""
Configuration management for the TOPSIS ranking engine.
"""
import yaml
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional
from pathlib import Path
from datetime import datetime

from .logging_utils import resolve_level


@dataclass
class IngestConfig:
    """Decision table ingestion configuration."""
    delimiter: str = ","
    list_separator: str = ","  # separator for weight / impact strings
    encoding: str = "utf-8"


@dataclass
class ExportConfig:
    """Result table export configuration."""
    score_column: str = "Topsis Score"
    rank_column: str = "Rank"
    score_decimals: int = 4
    filename: str = "topsis-result.csv"


@dataclass
class SensitivityConfig:
    """Ranking sensitivity analysis configuration."""
    enabled: bool = False
    perturbation: float = 0.2  # +/-20% on each weight


@dataclass
class OutputConfig:
    """Output configuration."""
    base_dir: str = "outputs"
    figure_dpi: int = 300
    figure_format: str = "png"
    save_figures: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"  # DEBUG shows zero-norm criteria and ideal-point ties
    console: bool = True


@dataclass
class Config:
    """Main configuration container."""
    ingest: IngestConfig = field(default_factory=IngestConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    sensitivity: SensitivityConfig = field(default_factory=SensitivityConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    run_id: Optional[str] = None

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = datetime.now().strftime("run_%Y%m%d_%H%M%S")

    def validate(self) -> None:
        """
        Check values that would otherwise fail midway through a run.

        Raises:
            ValueError: on the first invalid setting
        """
        p = self.sensitivity.perturbation
        if isinstance(p, bool) or not isinstance(p, (int, float)) or not 0 < p <= 1:
            raise ValueError(f"sensitivity.perturbation must be in (0, 1], got {p!r}")
        d = self.export.score_decimals
        if isinstance(d, bool) or not isinstance(d, int) or d < 0:
            raise ValueError(f"export.score_decimals must be a non-negative integer, got {d!r}")
        if not self.ingest.list_separator:
            raise ValueError("ingest.list_separator must not be empty")
        try:
            resolve_level(self.logging.level)
        except ValueError as e:
            raise ValueError(f"logging.level: {e}") from None

    @property
    def run_dir(self) -> Path:
        return Path(self.output.base_dir) / "runs" / self.run_id

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, path: Optional[str] = None):
        if path is None:
            path = self.run_dir / "configs_snapshot" / "config.yaml"
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> 'Config':
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        return cls(
            ingest=IngestConfig(**data.get('ingest', {})),
            export=ExportConfig(**data.get('export', {})),
            sensitivity=SensitivityConfig(**data.get('sensitivity', {})),
            output=OutputConfig(**data.get('output', {})),
            logging=LoggingConfig(**data.get('logging', {})),
            run_id=data.get('run_id')
        )


def create_run_directories(config: Config) -> Dict[str, Path]:
    """Create all output directories for a run."""
    run_dir = config.run_dir
    dirs = {
        'root': run_dir,
        'logs': run_dir / 'logs',
        'tables': run_dir / 'tables',
        'figures': run_dir / 'figures',
        'configs_snapshot': run_dir / 'configs_snapshot'
    }
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs


def get_latest_run_id(base_dir: str = "outputs") -> Optional[str]:
    """Find the most recent run_id by sorting run directories."""
    runs_dir = Path(base_dir) / "runs"
    if not runs_dir.exists():
        return None
    run_dirs = sorted(
        [d for d in runs_dir.iterdir() if d.is_dir() and d.name.startswith("run_")],
        key=lambda d: d.name,
        reverse=True,
    )
    if run_dirs:
        return run_dirs[0].name
    return None


def get_default_config() -> Config:
    """Get default configuration."""
    return Config()
