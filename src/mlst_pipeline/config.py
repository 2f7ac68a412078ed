"""Configuration management for MLST pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .exceptions import ConfigurationError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ConfigFileParser:
    """Parser for the sectioned MLST configuration file.

    Example::

        # Comments and blank lines are ignored
        [ST ALLELE TABLE FILES]
        st_allele_table.txt

        [ALLELE FILES]
        arcc_alleles.fasta
        aroe_alleles.fasta

        [REF FILES]
        NC007793_corrected.fsa

    The order of the allele files must match the column order of the ST
    table files.
    """

    SECTIONS = {
        "[ST ALLELE TABLE FILES]": "st_table_files",
        "[ALLELE FILES]": "allele_files",
        "[REF FILES]": "reference_files",
    }

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)

        if not self.config_file.exists() or not os.access(self.config_file, os.R_OK):
            raise ConfigurationError(f"Unable to read config file {self.config_file}")

    def parse(self) -> Dict[str, List[Path]]:
        """Parse the config file into lists of file paths keyed by section."""
        sections: Dict[str, List[Path]] = {name: [] for name in self.SECTIONS.values()}
        current: Optional[str] = None

        with open(self.config_file, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\r\n")

                # Comments and blank lines
                if line.startswith('#') or not line.strip():
                    continue

                if line in self.SECTIONS:
                    current = self.SECTIONS[line]
                    continue

                entry = Path(line)
                if not (entry.is_file() and os.access(entry, os.R_OK)):
                    raise ConfigurationError(
                        f"Unknown line '{line}': not a known section, readable file or comment",
                        config_file=str(self.config_file),
                        line_number=line_number
                    )

                if current is None:
                    raise ConfigurationError(
                        f"File entry '{line}' found outside of a known section",
                        config_file=str(self.config_file),
                        line_number=line_number
                    )

                sections[current].append(entry)

        return sections


@dataclass
class PipelineConfig:
    """Pipeline configuration settings."""

    st_table_files: List[Path]
    allele_files: List[Path]
    reference_files: List[Path]
    fast: bool = False
    output_dir: Optional[Path] = None
    output_suffix: str = ".mlstar.out"
    summary_file: Optional[Path] = None
    log_file: Optional[Path] = Path("mlstar.log")
    log_level: str = "INFO"
    quiet: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.st_table_files = [Path(p) for p in self.st_table_files]
        self.allele_files = [Path(p) for p in self.allele_files]
        self.reference_files = [Path(p) for p in self.reference_files]
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)
        if self.summary_file is not None:
            self.summary_file = Path(self.summary_file)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        self.log_level = str(self.log_level).upper()

        for name in ("st_table_files", "allele_files", "reference_files"):
            files = getattr(self, name)
            if not files:
                raise ConfigurationError("No files configured", parameter=name)
            for path in files:
                if not path.exists():
                    raise ConfigurationError(f"File not found: {path}", parameter=name)

        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")

        if not self.output_suffix:
            raise ConfigurationError("Output suffix must not be empty", parameter="output_suffix")

    @classmethod
    def from_config_file(cls, config_file: Path, **overrides) -> "PipelineConfig":
        """Load configuration from a sectioned config file."""
        sections = ConfigFileParser(config_file).parse()
        sections.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**sections)

    @classmethod
    def from_yaml(cls, yaml_file: Path, **overrides) -> "PipelineConfig":
        """Load configuration from YAML file."""
        yaml_file = Path(yaml_file)
        if not yaml_file.exists():
            raise ConfigurationError(f"Config file not found: {yaml_file}")

        try:
            with open(yaml_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            if not isinstance(data, dict):
                raise ConfigurationError("Expected a mapping at top level", config_file=str(yaml_file))

            data.update({k: v for k, v in overrides.items() if v is not None})
            return cls(**data)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML config: {e}")
        except TypeError as e:
            raise ConfigurationError(f"Invalid config parameters: {e}")

    @classmethod
    def from_args(cls, args: dict) -> "PipelineConfig":
        """Create configuration from command-line arguments."""
        config_file = args.get('config')
        if config_file is None:
            raise ConfigurationError("A config file is required", parameter="config")

        # Map command-line argument names to config field names
        arg_mapping = {
            'fast': 'fast',
            'output': 'output_dir',
            'summary': 'summary_file',
            'log': 'log_file',
            'log_level': 'log_level',
            'quiet': 'quiet',
        }

        overrides = {}
        for arg_name, config_name in arg_mapping.items():
            if arg_name in args and args[arg_name] is not None:
                overrides[config_name] = args[arg_name]

        # Flags only override when set
        for flag in ('fast', 'quiet'):
            if flag in overrides and not overrides[flag]:
                del overrides[flag]

        if args.get('debug'):
            overrides['log_level'] = "DEBUG"

        if Path(config_file).suffix.lower() in ('.yaml', '.yml'):
            return cls.from_yaml(config_file, **overrides)
        return cls.from_config_file(config_file, **overrides)
