"""
deskvfs Bootstrap

Start-up wiring for the engine:
- Loading configuration and the seed tree
- Initializing logging
- Constructing and initializing the one VirtualFileSystem
- Registering the bundled content sources for hydration

Collaborators receive the engine returned here; there is no global
instance.
"""

import time
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Any

from deskvfs.core.change_bus import ChangeBus
from deskvfs.core.config_loader import Config, ConfigLoader
from deskvfs.exceptions import EngineException
from deskvfs.filesystem.hydrator import (
    ContentHydrator,
    file_source,
    json_source,
    text_source,
    tutorial_source,
)
from deskvfs.filesystem.seed import (
    BASH_BIBLE,
    DEFAULT_FONTS,
    DEFAULT_THEMES,
    DEFAULT_TUTORIAL,
    FONTS,
    LINUX_BIBLE,
    READ_ME,
    SH_BIBLE,
    THEMES,
    README_TEXT,
    load_seed,
)
from deskvfs.filesystem.vfs import VirtualFileSystem
from deskvfs.logger import Logger, LogLevel, get_logger


class BootStage(Enum):
    """Start-up stages."""
    CONFIG_LOAD = auto()
    LOGGING_INIT = auto()
    SEED_LOAD = auto()
    ENGINE_INIT = auto()
    SOURCES = auto()
    COMPLETE = auto()
    FAILED = auto()


@dataclass
class BootResult:
    """Result of a boot attempt."""
    success: bool
    stage: BootStage
    message: str
    elapsed_time: float
    error: Optional[Exception] = None


def init_logging(config: Config) -> None:
    """Configure engine logging from the logging section."""
    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file,
        console_output=config.logging.console_output,
        use_colors=config.logging.use_colors,
    )


def register_default_sources(hydrator: ContentHydrator, config: Config) -> int:
    """
    Register the bundled documents for hydration.

    The bash and sh references are read from hydration.resource_dir
    when it is set; otherwise a short placeholder is used.

    Returns:
        Number of sources registered
    """
    home = config.filesystem.home
    sources = {
        READ_ME: text_source(README_TEXT),
        LINUX_BIBLE: tutorial_source(DEFAULT_TUTORIAL),
        THEMES: json_source(DEFAULT_THEMES),
        FONTS: json_source(DEFAULT_FONTS),
    }

    resource_dir = config.hydration.resource_dir
    for relative in (BASH_BIBLE, SH_BIBLE):
        name = relative.rsplit('/', 1)[-1]
        if resource_dir:
            sources[relative] = file_source(Path(resource_dir) / name)
        else:
            sources[relative] = text_source(f"# {name}\n\nReference not bundled.\n")

    return sum(1 for relative, source in sources.items() if hydrator.register(home + relative, source))


def create_engine(
    config: Optional[Config] = None,
    seed: Optional[dict[str, Any]] = None,
    bus: Optional[ChangeBus] = None,
    register_sources: bool = True
) -> VirtualFileSystem:
    """
    Construct and initialize a VirtualFileSystem.

    Logging is left as it is; use boot() for a full start-up.

    Raises:
        EngineException: If the seed or configuration is invalid
    """
    config = config or Config()
    vfs = VirtualFileSystem(config=config, bus=bus, seed=seed)
    vfs.init()
    if register_sources and config.hydration.enabled:
        register_default_sources(vfs.hydrator, config)
    return vfs


class Bootstrap:
    """
    Full engine start-up from a config file and an optional seed file.

    Example:
        >>> bootstrap = Bootstrap('deskvfs.json')
        >>> result = bootstrap.boot()
        >>> if result.success:
        ...     vfs = bootstrap.engine
    """

    def __init__(self, config_path: Optional[str] = None, seed_path: Optional[str] = None):
        self._config_path = config_path
        self._seed_path = seed_path
        self._stage = BootStage.CONFIG_LOAD
        self._config: Optional[Config] = None
        self._engine: Optional[VirtualFileSystem] = None

    @property
    def stage(self) -> BootStage:
        return self._stage

    @property
    def engine(self) -> Optional[VirtualFileSystem]:
        return self._engine

    @property
    def config(self) -> Optional[Config]:
        return self._config

    def boot(self, log_level: Optional[str] = None) -> BootResult:
        """
        Execute the start-up sequence.

        Args:
            log_level: Overrides logging.level from the configuration

        Returns:
            BootResult indicating success or failure
        """
        start = time.time()
        logger = get_logger('bootstrap')

        try:
            self._stage = BootStage.CONFIG_LOAD
            loader = ConfigLoader()
            if self._config_path:
                loader.load(self._config_path)
            if log_level:
                loader.set('logging.level', log_level.upper())
            self._config = loader.config

            self._stage = BootStage.LOGGING_INIT
            init_logging(self._config)

            self._stage = BootStage.SEED_LOAD
            seed = load_seed(self._seed_path) if self._seed_path else None

            self._stage = BootStage.ENGINE_INIT
            vfs = create_engine(self._config, seed=seed, register_sources=False)

            self._stage = BootStage.SOURCES
            registered = 0
            if self._config.hydration.enabled:
                registered = register_default_sources(vfs.hydrator, self._config)

            self._engine = vfs
            self._stage = BootStage.COMPLETE
            elapsed = time.time() - start
            logger.info(
                f"{self._config.engine.name} v{self._config.engine.version} ready",
                context={'elapsed_ms': f"{elapsed * 1000:.2f}", 'sources': registered}
            )
            return BootResult(
                success=True,
                stage=self._stage,
                message="Engine booted successfully",
                elapsed_time=elapsed
            )

        except EngineException as e:
            failed_at = self._stage
            self._stage = BootStage.FAILED
            logger.critical(f"Boot failed at stage {failed_at.name}: {e}")
            return BootResult(
                success=False,
                stage=failed_at,
                message=f"Boot failed: {e}",
                elapsed_time=time.time() - start,
                error=e
            )

    def shutdown(self) -> None:
        """Stop and clean up the engine."""
        if self._engine is None:
            return
        self._engine.stop()
        self._engine.cleanup()


def boot(
    config_path: Optional[str] = None,
    seed_path: Optional[str] = None,
    log_level: Optional[str] = None
) -> VirtualFileSystem:
    """
    Convenience wrapper around Bootstrap.

    Raises:
        EngineException: The error that stopped start-up
    """
    bootstrap = Bootstrap(config_path, seed_path)
    result = bootstrap.boot(log_level=log_level)
    if not result.success:
        raise result.error
    return bootstrap.engine
