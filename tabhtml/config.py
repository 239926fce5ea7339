from pathlib import Path
from typing import Dict, NamedTuple, Set

import yaml

from .compiler import INDENT_UNIT, TabhtmlCompiler, TabhtmlError


class ConfigError(TabhtmlError):
    pass


class Config(NamedTuple):
    write_pairs: Dict[Path, Path]  # {src: dst}
    watch_paths: Set[Path]
    encoding: str = 'ascii'
    strict: bool = False
    indent: str = INDENT_UNIT
    default_tag: str = 'div'

    def make_compiler(self) -> TabhtmlCompiler:
        return TabhtmlCompiler(strict=self.strict, indent=self.indent, default_tag=self.default_tag)


def parse_config(cfg, base_path: Path = Path('.')) -> Config:
    """Builds a Config from the mapping found in a YAML config file."""
    if not isinstance(cfg, dict) or not cfg.get('write'):
        raise ConfigError("Config must contain a non-empty 'write' list of src/dst pairs.")

    write_pairs = {}
    for to_write in cfg['write']:
        if not isinstance(to_write, dict) or 'src' not in to_write or 'dst' not in to_write:
            raise ConfigError(f"Invalid write entry (expected 'src' and 'dst'): {to_write!r}")
        write_pairs[base_path / to_write['src']] = base_path / to_write['dst']

    for key in ('indent', 'default_tag', 'encoding'):
        if key in cfg and not (isinstance(cfg[key], str) and cfg[key]):
            raise ConfigError(f"'{key}' must be a non-empty string, got {cfg[key]!r}")

    watch_paths = {watch_path for watch_path_str in cfg.get('watch') or [] for watch_path in base_path.glob(watch_path_str)}

    return Config(
        write_pairs=write_pairs,
        watch_paths=watch_paths,
        encoding=cfg.get('encoding', 'ascii'),
        strict=bool(cfg.get('strict', False)),
        indent=cfg.get('indent', INDENT_UNIT),
        default_tag=cfg.get('default_tag', 'div'),
    )


def load_config(path, base_path: Path = Path('.')) -> Config:
    with open(path, "r") as f:
        try:
            cfg = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse config {path}: {e}") from e
    return parse_config(cfg, base_path)
