"""
Core module for the TOPSIS ranking engine.
"""
from .config import (
    Config,
    IngestConfig,
    ExportConfig,
    SensitivityConfig,
    OutputConfig,
    LoggingConfig,
    create_run_directories,
    get_default_config,
    get_latest_run_id
)
from .logging_utils import setup_logging, get_logger, resolve_level, LogContext
from .utils import (
    save_json,
    load_json,
    save_json_numpy,
    NumpyEncoder
)

__all__ = [
    'Config', 'IngestConfig', 'ExportConfig', 'SensitivityConfig', 'OutputConfig', 'LoggingConfig',
    'create_run_directories', 'get_default_config', 'get_latest_run_id',
    'setup_logging', 'get_logger', 'resolve_level', 'LogContext',
    'save_json', 'load_json', 'save_json_numpy', 'NumpyEncoder'
]
