"""Configuration Manager implementation for the report decompiler.

This module provides functionality to load, validate, and manage the
decompiler thresholds and the extensions to its knowledge base
(additional terminology, compliance patterns and stop words).
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from ..decompiler.patterns import DEFAULT_KNOWLEDGE_BASE, CompliancePattern, KnowledgeBase
from ..models.enums import ComplianceType
from .models import ConfigurationError, DecompilerConfig, ValidationResult


logger = logging.getLogger(__name__)

ENV_PREFIX = "DECOMPILER_"


class ConfigurationManager:
    """
    Manager for decompiler configuration.

    Handles loading and validation of threshold settings from files,
    dictionaries or the environment, and of knowledge base extensions.
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._config = DecompilerConfig()
        self._knowledge_base = DEFAULT_KNOWLEDGE_BASE
        self._is_loaded = False

    @property
    def config(self) -> DecompilerConfig:
        """Get the current decompiler configuration."""
        return self._config

    @property
    def knowledge_base(self) -> KnowledgeBase:
        """Get the current knowledge base, including loaded extensions."""
        return self._knowledge_base

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Threshold settings
    # =========================================================================

    def load_config(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> ValidationResult:
        """
        Load and validate decompiler settings.

        Values not present in the source keep their current setting.

        Args:
            source: JSON file path or dictionary of settings.

        Returns:
            ValidationResult with any warnings (e.g. unknown keys).

        Raises:
            ConfigurationError: If any setting is invalid; nothing is applied.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Decompiler configuration must be a JSON object")

        result, values = self._validate_settings(raw_data)
        if not result.is_valid:
            raise ConfigurationError(
                "Decompiler configuration validation failed",
                validation_result=result
            )

        merged = self._config.to_dict()
        merged.update(values)
        self._config = DecompilerConfig(**merged)
        self._is_loaded = True
        return result

    def load_from_env(self, environ: Optional[Mapping[str, str]] = None) -> ValidationResult:
        """
        Load settings from ``DECOMPILER_*`` environment variables.

        For example ``DECOMPILER_PARAGRAPH_MIN_LENGTH=30`` sets
        ``paragraph_min_length``. Variables that do not name a setting
        are ignored.
        """
        environ = os.environ if environ is None else environ
        field_types = DecompilerConfig.field_types()
        result = ValidationResult(is_valid=True)
        raw: Dict[str, Any] = {}

        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX):
                continue
            name = key[len(ENV_PREFIX):].lower()
            if name not in field_types:
                continue
            try:
                raw[name] = field_types[name](value.strip())
            except ValueError:
                result.add_error(
                    f"{key}: cannot convert {value!r} to {field_types[name].__name__}"
                )

        if not result.is_valid:
            raise ConfigurationError(
                "Environment configuration validation failed",
                validation_result=result
            )

        if not raw:
            return result
        return result.merge(self.load_config(raw))

    def _validate_settings(
        self,
        data: Dict[str, Any]
    ) -> tuple[ValidationResult, Dict[str, Any]]:
        """Validate a settings dictionary against DecompilerConfig."""
        result = ValidationResult(is_valid=True)
        field_types = DecompilerConfig.field_types()
        values: Dict[str, Any] = {}

        for name, value in data.items():
            if name not in field_types:
                result.add_warning(f"Unknown configuration key '{name}' ignored")
                continue

            expected = field_types[name]
            if expected is int:
                if isinstance(value, bool) or not isinstance(value, int):
                    result.add_error(f"'{name}' must be an integer")
                    continue
                if value < 0:
                    result.add_error(f"'{name}' must be non-negative")
                    continue
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    result.add_error(f"'{name}' must be a number")
                    continue
                if not 0.0 <= value <= 1.0:
                    result.add_error(f"'{name}' must be between 0.0 and 1.0")
                    continue
                value = float(value)

            values[name] = value

        title_min = values.get("title_min_length", self._config.title_min_length)
        title_max = values.get("title_max_length", self._config.title_max_length)
        if result.is_valid and title_min >= title_max:
            result.add_error("'title_min_length' must be less than 'title_max_length'")

        return result, values

    # =========================================================================
    # Knowledge base extensions
    # =========================================================================

    def load_knowledge_base(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> ValidationResult:
        """
        Load and validate knowledge base extensions.

        Expected shape::

            {
                "terms": ["veteran", "pollard"],
                "compliance_patterns": [
                    {"pattern": "Conservation\\s+Area", "standard": "Conservation Area",
                     "type": "regulation"}
                ],
                "stop_words": ["from"]
            }

        Extensions are appended to the built-in vocabulary and patterns.

        Raises:
            ConfigurationError: If any entry is invalid; nothing is applied.
        """
        raw_data = self._parse_source(source)
        if not isinstance(raw_data, dict):
            raise ConfigurationError("Knowledge base configuration must be a JSON object")

        result = ValidationResult(is_valid=True)

        terms = raw_data.get("terms", [])
        if not isinstance(terms, list) or not all(isinstance(t, str) and t.strip() for t in terms):
            result.add_error("'terms' must be a list of non-empty strings")
            terms = []

        stop_words = raw_data.get("stop_words", [])
        if not isinstance(stop_words, list) or not all(isinstance(w, str) for w in stop_words):
            result.add_error("'stop_words' must be a list of strings")
            stop_words = []

        patterns: List[CompliancePattern] = []
        raw_patterns = raw_data.get("compliance_patterns", [])
        if not isinstance(raw_patterns, list):
            result.add_error("'compliance_patterns' must be a list")
            raw_patterns = []
        for i, entry in enumerate(raw_patterns):
            pattern_result, pattern = self._validate_compliance_pattern(entry, index=i)
            result = result.merge(pattern_result)
            if pattern:
                patterns.append(pattern)

        if not result.is_valid:
            raise ConfigurationError(
                "Knowledge base validation failed",
                validation_result=result
            )

        self._knowledge_base = self._knowledge_base.extend(
            terms=terms,
            compliance_patterns=patterns,
            stop_words=stop_words,
        )
        self._is_loaded = True
        logger.info(
            f"Loaded knowledge base extensions: {len(terms)} terms, "
            f"{len(patterns)} compliance patterns, {len(stop_words)} stop words"
        )
        return result

    def _validate_compliance_pattern(
        self,
        data: Any,
        index: int = 0
    ) -> tuple[ValidationResult, Optional[CompliancePattern]]:
        """Validate a single compliance pattern dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Compliance pattern [{index}]"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: must be an object")
            return result, None

        for required in ("pattern", "standard", "type"):
            if not isinstance(data.get(required), str) or not data[required].strip():
                result.add_error(f"{prefix}: '{required}' must be a non-empty string")
        if not result.is_valid:
            return result, None

        try:
            re.compile(data["pattern"])
        except re.error as e:
            result.add_error(f"{prefix}: invalid regex: {e}")

        valid_types = [t.value for t in ComplianceType]
        if data["type"] not in valid_types:
            result.add_error(f"{prefix}: 'type' must be one of {valid_types}")

        if not result.is_valid:
            return result, None

        return result, CompliancePattern(
            pattern=data["pattern"],
            standard=data["standard"].strip(),
            type=ComplianceType(data["type"]),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}")

        return source

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects files named:
        - decompiler.json
        - knowledge_base.json

        Missing files are skipped.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        settings_file = config_dir / "decompiler.json"
        if settings_file.exists():
            try:
                result = result.merge(self.load_config(settings_file))
            except ConfigurationError as e:
                result.add_error(f"Decompiler settings loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        kb_file = config_dir / "knowledge_base.json"
        if kb_file.exists():
            try:
                result = result.merge(self.load_knowledge_base(kb_file))
            except ConfigurationError as e:
                result.add_error(f"Knowledge base loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        self._config_dir = config_dir
        return result

    def save_to_directory(
        self,
        config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        """
        Save the current settings to ``decompiler.json`` in a directory.

        Args:
            config_dir: Directory to save to. Uses current config_dir if None.
        """
        config_dir = Path(config_dir) if config_dir else self._config_dir
        if not config_dir:
            raise ConfigurationError("No configuration directory specified")

        config_dir.mkdir(parents=True, exist_ok=True)
        with open(config_dir / "decompiler.json", "w", encoding="utf-8") as f:
            json.dump(self._config.to_dict(), f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to the built-in defaults."""
        self._config = DecompilerConfig()
        self._knowledge_base = DEFAULT_KNOWLEDGE_BASE
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return {
            "settings": self._config.to_dict(),
            "knowledge_base": {
                "terms": list(self._knowledge_base.terms),
                "compliance_patterns": [
                    {
                        "pattern": p.pattern,
                        "standard": p.standard,
                        "type": p.type.value,
                    }
                    for p in self._knowledge_base.compliance_patterns
                ],
                "stop_words": sorted(self._knowledge_base.stop_words),
            },
        }
