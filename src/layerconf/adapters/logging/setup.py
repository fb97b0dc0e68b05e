"""Logging bootstrap for the command-line entry points.

Library modules only ever call ``logging.getLogger(__name__)``. The CLI
initialises the lib_log_rich runtime once per process from the
``lib_log_rich`` section of the loaded configuration and bridges standard
logging into it.

Contents:
    * :class:`LoggingConfigModel` - validated view of the ``lib_log_rich`` section.
    * :func:`init_logging` - idempotent runtime initialisation.
"""

from __future__ import annotations

from typing import Any

import lib_log_rich.config
import lib_log_rich.runtime
from pydantic import BaseModel, ConfigDict

from layerconf import __init__conf__
from layerconf.application.config import Config

LOGGING_SECTION = "lib_log_rich"


class LoggingConfigModel(BaseModel):
    """Validated ``lib_log_rich`` section; unknown keys pass through to RuntimeConfig.

    Example:
        >>> model = LoggingConfigModel(service="orders", console_level="DEBUG")
        >>> model.service, model.environment
        ('orders', None)
        >>> model.model_dump(exclude={"service", "environment"}, exclude_none=True)
        {'console_level': 'DEBUG'}
    """

    service: str | None = None
    environment: str | None = None

    model_config = ConfigDict(extra="allow")


def _logging_section(config: Config) -> dict[str, Any]:
    section = config.to_object().get(LOGGING_SECTION)
    return section if isinstance(section, dict) else {}


def build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    """Translate the ``lib_log_rich`` section of *config* into a RuntimeConfig.

    The service name defaults to the package name and the environment to the
    deployment environment the configuration was loaded for.
    """
    parsed = LoggingConfigModel.model_validate(_logging_section(config))
    extra_config = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment or config.context.environment,
        **extra_config,
    )


def init_logging(config: Config) -> None:
    """Initialise the lib_log_rich runtime once and attach standard logging.

    Later calls return immediately, so every entry point may call it.
    ``.env`` files are enabled first so ``LOG_*`` variables take effect.
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()


__all__ = [
    "LOGGING_SECTION",
    "LoggingConfigModel",
    "build_runtime_config",
    "init_logging",
]
