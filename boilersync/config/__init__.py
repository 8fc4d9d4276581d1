from .loader import ConfigError, load_config, parse_sources
from .models import BoilersyncConfig, OutputConfig, PathPair, SourceSpec

__all__ = [
    "BoilersyncConfig",
    "ConfigError",
    "OutputConfig",
    "PathPair",
    "SourceSpec",
    "load_config",
    "parse_sources",
]
