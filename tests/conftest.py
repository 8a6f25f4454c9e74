import pytest

from shared.config import DeckLabConfig
from shared.logger import DeckLabLogger

from decklab.analyzers.generator import generate_cipher_mapping
from decklab.core.engine import DeckLabEngine
from decklab.core.models import CipherConfig


@pytest.fixture
def mapping():
    return generate_cipher_mapping(42, CipherConfig())


@pytest.fixture
def silent_logger():
    return DeckLabLogger("tests", console_output=False)


@pytest.fixture
def engine(silent_logger):
    return DeckLabEngine(DeckLabConfig(), logger=silent_logger)
