#!/usr/bin/env python
# -*- coding: utf-8 -*-
import json
import logging
from mg_errors import MGError, LexiconError, UnregisteredFeatureError
from mg_features import (LexicalItem, CATEGORIAL, SELECTOR, STRONG_SELECTOR, ADJUNCT_SELECTOR, PHASE,
                         LICENSOR, LICENSEE, AGREEMENT, DELAYED)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ['C', 'T', 'v', 'V', 'D', 'N', 'P', 'A']
DEFAULT_MOVEMENT_FEATURES = ['wh', 'case', 'top', 'foc']


class FeatureTypeRegistry(object):
    def __init__(self, categories=None, movement_features=None):
        if categories == None:
            categories = DEFAULT_CATEGORIES
        if movement_features == None:
            movement_features = DEFAULT_MOVEMENT_FEATURES
        self.categories = set(categories)
        self.movement_features = set(movement_features)

    def register_category(self, name):
        self.categories.add(name)

    def register_movement(self, name):
        self.movement_features.add(name)

    def is_valid(self, feature):
        if feature.kind in (CATEGORIAL, SELECTOR, STRONG_SELECTOR, ADJUNCT_SELECTOR, PHASE):
            return feature.name in self.categories
        elif feature.kind in (LICENSOR, LICENSEE):
            return feature.name in self.movement_features
        elif feature.kind == AGREEMENT:
            return True
        elif feature.kind == DELAYED:
            return self.is_valid(feature.inner)
        return False

    def validate(self, word, item):
        for feature in item.features:
            if not self.is_valid(feature):
                raise UnregisteredFeatureError(word, feature)


class Lexicon(object):
    #maps words to their lexical items, plus the covert heads that are not tied to any input word
    def __init__(self, registry=None, phase_heads=None):
        if registry == None:
            registry = FeatureTypeRegistry()
        self.registry = registry
        self.entries = {}
        self.covert = []
        self.phase_heads = phase_heads

    def add(self, word, features, agreement=None):
        item = LexicalItem(word, features, agreement)
        #a bad entry is reported here rather than turning into a silent mismatch during parsing
        self.registry.validate(word, item)
        if word not in self.entries:
            self.entries[word] = []
        if item not in self.entries[word]:
            self.entries[word].append(item)
        return item

    def add_covert(self, features, agreement=None, label=''):
        item = LexicalItem('', features, agreement)
        self.registry.validate(label or u'ε', item)
        if item not in self.covert:
            self.covert.append(item)
        return item

    def get_entries(self, word):
        return list(self.entries.get(word, []))

    def covert_entries(self):
        return list(self.covert)

    def words(self):
        return sorted(self.entries)

    def __contains__(self, word):
        return word in self.entries

    def __len__(self):
        return sum([len(items) for items in self.entries.values()])+len(self.covert)


def lexicon_from_dict(grammar):
    #grammar = {"lexicon": {word: [feature strings]}, "covert": [feature strings],
    #           "categories": [...], "movement": [...], "phase_heads": [...]}
    if not isinstance(grammar, dict) or 'lexicon' not in grammar:
        raise LexiconError("A grammar must be a JSON object with a 'lexicon' entry")
    registry = FeatureTypeRegistry(categories=grammar.get('categories'),
                                   movement_features=grammar.get('movement'))
    lexicon = Lexicon(registry=registry, phase_heads=grammar.get('phase_heads'))
    entries = grammar['lexicon']
    if not isinstance(entries, dict):
        raise LexiconError("The 'lexicon' entry must map words to lists of feature strings")
    for word in entries:
        feature_strings = entries[word]
        if isinstance(feature_strings, str):
            feature_strings = [feature_strings]
        for feature_string in feature_strings:
            lexicon.add(word, feature_string)
    for feature_string in grammar.get('covert', []):
        lexicon.add_covert(feature_string)
    logger.info("Loaded %d lexical entries for %d words (%d covert)", len(lexicon), len(lexicon.words()),
                len(lexicon.covert))
    return lexicon


def load_grammar(grammar_file):
    try:
        with open(grammar_file, encoding='utf-8') as grammar:
            data = json.load(grammar)
    except (IOError, ValueError) as e:
        raise LexiconError("Could not read grammar file "+str(grammar_file)+": "+str(e))
    try:
        return lexicon_from_dict(data)
    except MGError as e:
        logger.error("Error in grammar file %s: %s", grammar_file, e)
        raise
