"""Selectors and artifact names shared by the counter page and its tests."""

from enum import StrEnum


class DataTest(StrEnum):
    """Values of the ``data-test`` attributes the counter page exposes."""

    COUNT_OUTPUT = "count-output"
    BUTTON_INCREMENT = "button-increment"
    BUTTON_DISPLAY = "button-display"
    DISPLAY = "display"


class Screenshot(StrEnum):
    """Screenshot file stems, one per test step."""

    BASIC_RENDER = "basicRender"
    INITIAL_COUNT = "initialCount"
    INCREMENTED_COUNT = "incrementedCount"
    MULTI_INCREMENTED_COUNT = "multiIncrementedCount"
    MESSAGE_DISPLAY = "messageDisplay"
    MESSAGE_HIDDEN = "messageHidden"


HEADLINE_SELECTOR = "h1"

# Evaluated against the count element; the page renders the count as its inner HTML.
PARSE_COUNT_JS = "e => parseInt(e.innerHTML)"


def data_test_selector(data_test: DataTest) -> str:
    return f'[data-test="{data_test}"]'
