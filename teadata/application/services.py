"""Application layer - backend selection from configuration."""

from typing import Any, Final

from ..config import Settings, settings
from ..domain.envelope import ResultEnvelope
from ..domain.exceptions import TeaDataError
from ..infrastructure.database.tea_service import SqliteTeaService
from ..infrastructure.http.envelope_service import EnvelopeTeaService
from ..infrastructure.http.rest_service import RestTeaService
from ..logging_config import get_logger
from .data_service import DataService

logger: Final = get_logger(__name__)


def create_data_service(config: Settings | None = None, **kwargs: Any) -> DataService[Any]:
    """Build the backend named by ``config.backend`` without initializing it.

    Args:
        config: Settings to use, the global settings by default
        **kwargs: Passed to the REST backends (e.g. ``transport``)
    """
    config = config or settings

    if config.backend == "sqlite":
        return SqliteTeaService()
    if config.backend == "rest":
        return RestTeaService(timeout=config.http_timeout, **kwargs)
    if config.backend == "rest-envelope":
        return EnvelopeTeaService(timeout=config.http_timeout, **kwargs)
    raise ValueError(f"Unsupported backend: {config.backend}")


async def open_data_service_async(
    config: Settings | None = None, **kwargs: Any
) -> DataService[Any]:
    """Build the configured backend and initialize it with its locator.

    Raises:
        TeaDataError: If initialization fails (for the enveloped backend, when
            it reports failure)
    """
    config = config or settings
    service = create_data_service(config, **kwargs)

    result = await service.initialize_async(config.locator)
    if isinstance(result, ResultEnvelope) and not result.success:
        raise TeaDataError(result.message)

    logger.info("Data service ready", backend=config.backend)
    return service


def open_data_service(config: Settings | None = None, **kwargs: Any) -> DataService[Any]:
    """Blocking variant of ``open_data_service_async``."""
    config = config or settings
    service = create_data_service(config, **kwargs)

    result = service.initialize(config.locator)
    if isinstance(result, ResultEnvelope) and not result.success:
        raise TeaDataError(result.message)

    logger.info("Data service ready", backend=config.backend)
    return service
