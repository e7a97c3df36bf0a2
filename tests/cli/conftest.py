import logging

import pytest


@pytest.fixture(autouse=True)
def restore_logging():
    handlers = logging.root.handlers[:]
    level = logging.root.level

    yield

    # The CLI configures logging process-wide (and disables it unless asked to be verbose).
    logging.disable(logging.NOTSET)
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)
