"""Engine settings and bootstrap.

Settings come from an optional YAML file; ``FORM_ENGINE_FORMS_DIR`` adds a
forms directory on top of whatever the file lists.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from form_engine.engine.session_engine import FormEngine
from form_engine.engine.validation_engine import SchemaValidatorCache, ValidationEngine
from form_engine.forms.demo import demo_contact_form
from form_engine.forms.loader import load_forms
from form_engine.forms.registry import FormRegistry

logger = logging.getLogger(__name__)

FORMS_DIR_ENV = "FORM_ENGINE_FORMS_DIR"


class EngineSettings(BaseModel):
    """Configuration for building a FormEngine."""

    forms_dirs: list[str] = Field(
        default_factory=list,
        description="Files or directories of form definitions to load at startup"
    )
    include_demo_form: bool = Field(default=True, description="Register the built-in demo form")
    check_formats: bool = Field(default=True, description="Enforce string 'format' hints")
    log_level: str = Field(default="INFO", description="Log level used by the CLI")


def load_settings(path: Path | str | None = None) -> EngineSettings:
    """Load settings from a YAML file and the environment.

    Args:
        path: Optional YAML settings file

    Returns:
        EngineSettings instance
    """
    data: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    settings = EngineSettings(**data)

    env_dir = os.environ.get(FORMS_DIR_ENV)
    if env_dir and env_dir not in settings.forms_dirs:
        settings.forms_dirs.append(env_dir)

    return settings


def build_engine(settings: EngineSettings | None = None) -> FormEngine:
    """Create a FormEngine with its forms loaded according to ``settings``."""
    settings = settings or EngineSettings()

    registry = FormRegistry()
    engine = FormEngine(
        registry=registry,
        validation_engine=ValidationEngine(
            SchemaValidatorCache(check_formats=settings.check_formats)
        ),
    )

    if settings.include_demo_form:
        engine.register_form(demo_contact_form())

    for forms_path in settings.forms_dirs:
        forms = load_forms(forms_path, registry)
        logger.info("Loaded %d form(s) from %s", len(forms), forms_path)

    return engine
