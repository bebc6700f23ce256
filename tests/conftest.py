import pytest
from loguru import logger


@pytest.fixture
def caplog(caplog):
    # Route loguru messages into pytest's log capture
    logger.enable("nfadfa")
    handler_id = logger.add(
        caplog.handler,
        format="{message}",
        level=0,
        filter=lambda record: record["level"].no >= caplog.handler.level,
        enqueue=False,
    )
    yield caplog
    logger.remove(handler_id)
    logger.disable("nfadfa")
