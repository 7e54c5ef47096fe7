import logging

import pytest

from wikiview.utils.logger import logger, set_log_level


def test_set_log_level_accepts_names_and_numbers():
    previous = logger.level
    try:
        set_log_level("debug")
        assert logger.level == logging.DEBUG
        set_log_level(logging.WARNING)
        assert logger.level == logging.WARNING
        with pytest.raises(ValueError):
            set_log_level("chatty")
    finally:
        logger.setLevel(previous)
