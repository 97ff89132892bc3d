import random

import pytest

FLOOD_REPORT = (
    "The flood reached the lower town before dawn, and most families had already moved "
    "their cars to the ridge road. Water stood knee deep in the bakery. By noon the river "
    "had dropped a full meter, leaving a line of brown silt along every wall on Mill Street. "
    "Volunteers from the school carried sandbags in relays until the light failed. "
    "Nobody was hurt."
)


@pytest.fixture
def flood_report():
    return FLOOD_REPORT


@pytest.fixture
def rng():
    return random.Random(1234)
