import logging

import pytest


@pytest.fixture(autouse=True)
def reset_wcm_logger():
    """Drop handlers the CLI attaches so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("wcm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
