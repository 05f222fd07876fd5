"""Shared fixtures: small grammars and parser configuration."""

from pathlib import Path

import pytest

from mg_derivation import IndexCounter
from mg_lexicon import Lexicon
from mg_parser import ParserConfig

GRAMMAR_DIR = Path(__file__).parent.parent / "grammars"


@pytest.fixture
def counter():
    return IndexCounter(start=100)


@pytest.fixture
def config():
    return ParserConfig()


@pytest.fixture
def basic_lexicon():
    lexicon = Lexicon()
    lexicon.add("the", "=N D")
    lexicon.add("cat", "N")
    lexicon.add("sleeps", "V")
    lexicon.add_covert("=V =D T")
    lexicon.add_covert("=T C")
    return lexicon


@pytest.fixture
def wh_lexicon():
    lexicon = Lexicon()
    lexicon.add("what", "D -wh")
    lexicon.add("who", "D -wh")
    lexicon.add("John", "D")
    lexicon.add("Mary", "D")
    lexicon.add("saw", "=D =D V")
    lexicon.add_covert("=V T")
    lexicon.add_covert("=T +wh C")
    return lexicon


@pytest.fixture
def english_grammar_path():
    return GRAMMAR_DIR / "english.json"
