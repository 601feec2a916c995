import pytest

from pokedex.generations import generation_range
from pokedex.logger import configure_logging
from pokedex.utils import parse_page_params


def test_parse_page_params_defaults():
    assert parse_page_params(None, None, default_page_size=24, max_page_size=100) == (1, 24)
    assert parse_page_params("", "", default_page_size=24, max_page_size=100) == (1, 24)


def test_parse_page_params_values():
    assert parse_page_params("3", "50", default_page_size=24, max_page_size=100) == (3, 50)


@pytest.mark.parametrize(
    "page,page_size",
    [("0", None), ("-1", None), ("x", None), (None, "0"), (None, "101"), (None, "1.5")],
)
def test_parse_page_params_rejects(page, page_size):
    with pytest.raises(ValueError):
        parse_page_params(page, page_size, default_page_size=24, max_page_size=100)


def test_generation_range_lookup():
    assert generation_range("1") == (1, 151)
    assert generation_range(" 9 ") == (899, 1017)
    assert generation_range("", universe=500) == (1, 500)
    assert generation_range(None, universe=500) == (1, 500)
    assert generation_range("10", universe=500) == (1, 500)


def test_configure_logging_adds_one_handler():
    logger = configure_logging("DEBUG")
    handlers = len(logger.handlers)

    configure_logging("INFO")

    assert len(logger.handlers) == handlers
    assert logger.level == 20


def test_configure_logging_names_its_handler():
    logger = configure_logging("INFO")
    configure_logging("INFO")

    named = [h for h in logger.handlers if h.get_name() == "pokedex"]
    assert len(named) == 1
