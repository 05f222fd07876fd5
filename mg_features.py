#!/usr/bin/env python
# -*- coding: utf-8 -*-
import re
from collections import namedtuple
from mg_errors import FeatureSyntaxError

CATEGORIAL = 'Categorial'
SELECTOR = 'Selector'
STRONG_SELECTOR = 'StrongSelector'
ADJUNCT_SELECTOR = 'AdjunctSelector'
LICENSOR = 'Licensor'
LICENSEE = 'Licensee'
AGREEMENT = 'Agreement'
PHASE = 'Phase'
DELAYED = 'Delayed'
#markers do not take part in feature checking, they just annotate the item
MARKER_KINDS = (AGREEMENT, PHASE, DELAYED)
PHASE_SYMBOL = u'⚑'
PHI_SYMBOL = u'φ'
DELAY_SUFFIX = '[delay]'
#side a selector wants its complement on: D= (and the strong D<=) put it before the head
COMPLEMENT_LEFT = 'left'
name_pattern = re.compile(r'^\w+$', re.UNICODE)
agreement_pattern = re.compile(r'^(\w+)=(\w+)$', re.UNICODE)
#prefixed spellings (cat:D, sel:D, sel+:D ...) are accepted alongside the symbolic ones
prefixed_kinds = {'cat': CATEGORIAL, 'sel': SELECTOR, 'sel+': STRONG_SELECTOR, 'sel*': ADJUNCT_SELECTOR,
                  'licensor': LICENSOR, 'licensee': LICENSEE, 'phase': PHASE}


class Feature(namedtuple('Feature', ['kind', 'name', 'value', 'inner'])):
    __slots__ = ()

    def matches(self, other):
        #the merge licensing test, always a selector against a categorial feature
        return (self.kind in (SELECTOR, STRONG_SELECTOR) and other != None and other.kind == CATEGORIAL
                and self.name == other.name)

    def matches_move(self, other):
        return self.kind == LICENSOR and other != None and other.kind == LICENSEE and self.name == other.name

    def triggers_head_movement(self):
        return self.kind == STRONG_SELECTOR

    def selects_left(self):
        return self.kind in (SELECTOR, STRONG_SELECTOR) and self.value == COMPLEMENT_LEFT

    def is_phase_head(self):
        return self.kind == PHASE

    def is_delayed(self):
        return self.kind == DELAYED

    def is_marker(self):
        return self.kind in MARKER_KINDS

    def __str__(self):
        if self.kind == CATEGORIAL:
            return self.name
        elif self.kind == SELECTOR:
            if self.selects_left():
                return self.name+'='
            return '='+self.name
        elif self.kind == STRONG_SELECTOR:
            if self.selects_left():
                return self.name+'<='
            return '=>'+self.name
        elif self.kind == ADJUNCT_SELECTOR:
            return u'≈'+self.name
        elif self.kind == LICENSOR:
            return '+'+self.name
        elif self.kind == LICENSEE:
            return '-'+self.name
        elif self.kind == AGREEMENT:
            return PHI_SYMBOL+':'+self.name+'='+self.value
        elif self.kind == PHASE:
            return PHASE_SYMBOL+self.name
        return str(self.inner)+DELAY_SUFFIX

    def __repr__(self):
        if self.kind == AGREEMENT:
            return 'Agreement(%r, %r)' % (self.name, self.value)
        elif self.kind == DELAYED:
            return 'Delayed(%r)' % (self.inner,)
        elif self.selects_left():
            return '%s(%r, %r)' % (self.kind, self.name, self.value)
        return '%s(%r)' % (self.kind, self.name)


def Categorial(name):
    return Feature(CATEGORIAL, name, None, None)


def Selector(name, side=None):
    return Feature(SELECTOR, name, side, None)


def StrongSelector(name, side=None):
    return Feature(STRONG_SELECTOR, name, side, None)


def AdjunctSelector(name):
    return Feature(ADJUNCT_SELECTOR, name, None, None)


def Licensor(name):
    return Feature(LICENSOR, name, None, None)


def Licensee(name):
    return Feature(LICENSEE, name, None, None)


def Agreement(key, value):
    return Feature(AGREEMENT, key, value, None)


def Phase(name):
    return Feature(PHASE, name, None, None)


def Delayed(feature):
    if feature.kind == DELAYED:
        raise FeatureSyntaxError(str(feature), "delayed features cannot be nested")
    return Feature(DELAYED, feature.name, None, feature)


def check_name(name, feature_string):
    if not name_pattern.match(name):
        raise FeatureSyntaxError(feature_string, "'"+name+"' is not a valid feature name")
    return name


def parse_feature(feature_string):
    #reads a single feature in either the symbolic notation (=D, D=, =>D, D<=, ≈N, +wh, -wh, ⚑C, φ:num=sg, =D[delay])
    #or the prefixed notation (cat:D, sel:D, sel+:D, sel*:N, licensor:wh, licensee:wh, phase:C)
    fs = feature_string.strip()
    if fs == '':
        raise FeatureSyntaxError(feature_string, "empty feature")
    if fs.endswith(DELAY_SUFFIX):
        return Delayed(parse_feature(fs[:-len(DELAY_SUFFIX)]))
    if fs.startswith(PHI_SYMBOL+':') or fs.startswith('phi:'):
        agreement = agreement_pattern.match(fs.split(':', 1)[1])
        if not agreement:
            raise FeatureSyntaxError(feature_string, "agreement features look like phi:key=value")
        return Agreement(agreement.group(1), agreement.group(2))
    if fs.startswith(PHASE_SYMBOL):
        return Phase(check_name(fs[len(PHASE_SYMBOL):], feature_string))
    if ':' in fs:
        (prefix, name) = fs.split(':', 1)
        if prefix not in prefixed_kinds:
            raise FeatureSyntaxError(feature_string, "unknown feature prefix '"+prefix+"'")
        return Feature(prefixed_kinds[prefix], check_name(name, feature_string), None, None)
    if fs.endswith('<='):
        return StrongSelector(check_name(fs[:-2], feature_string), COMPLEMENT_LEFT)
    elif fs.endswith('='):
        return Selector(check_name(fs[:-1], feature_string), COMPLEMENT_LEFT)
    elif fs.startswith('=>'):
        return StrongSelector(check_name(fs[2:], feature_string))
    elif fs[0] in (u'≈', '~'):
        return AdjunctSelector(check_name(fs[1:], feature_string))
    elif fs[0] == '=':
        return Selector(check_name(fs[1:], feature_string))
    elif fs[0] == '+':
        return Licensor(check_name(fs[1:], feature_string))
    elif fs[0] == '-':
        return Licensee(check_name(fs[1:], feature_string))
    return Categorial(check_name(fs, feature_string))


def parse_features(features):
    #accepts a whitespace separated string or a list of strings/Features
    if isinstance(features, str):
        features = features.split()
    parsed = []
    for feature in features:
        if isinstance(feature, Feature):
            parsed.append(feature)
        else:
            parsed.append(parse_feature(feature))
    return parsed


def unify_agreement(agreement1, agreement2):
    #flat key->value unification, returns None on a clash
    unified = dict(agreement1 or {})
    for key in (agreement2 or {}):
        if key in unified and unified[key] != agreement2[key]:
            return None
        unified[key] = agreement2[key]
    return unified


class LexicalItem(object):
    def __init__(self, phonetic_form='', features=(), agreement=None):
        self.phonetic_form = phonetic_form
        agreement = dict(agreement or {})
        syn_features = []
        for feature in parse_features(features):
            #agreement annotations go straight into the agreement map
            if feature.kind == AGREEMENT:
                if feature.name in agreement and agreement[feature.name] != feature.value:
                    raise FeatureSyntaxError(str(feature), "conflicting agreement values for '"+feature.name+"'")
                agreement[feature.name] = feature.value
            else:
                syn_features.append(feature)
        self.features = tuple(syn_features)
        self.agreement = agreement

    def syntactic_features(self):
        return [f for f in self.features if not f.is_marker()]

    def first_feature(self):
        #the feature the next operation will check (phase and delay markers are skipped)
        for feature in self.features:
            if not feature.is_marker():
                return feature
        return None

    def rest(self):
        #a copy of this item with the first checkable feature consumed
        first = self.first_feature()
        features = list(self.features)
        if first != None:
            features.remove(first)
        return LexicalItem(self.phonetic_form, features, self.agreement)

    def without(self, feature):
        features = list(self.features)
        if feature in features:
            features.remove(feature)
        return LexicalItem(self.phonetic_form, features, self.agreement)

    def delayed_features(self):
        return [f.inner for f in self.features if f.is_delayed()]

    def phase_features(self):
        return [f for f in self.features if f.is_phase_head()]

    def is_saturated(self):
        syn_features = self.syntactic_features()
        return len(syn_features) == 0 or (len(syn_features) == 1 and syn_features[0].kind == CATEGORIAL)

    def feature_string(self):
        features = [str(f) for f in self.features]
        for key in sorted(self.agreement):
            features.append(str(Agreement(key, self.agreement[key])))
        return ' '.join(features)

    def __eq__(self, other):
        if not isinstance(other, LexicalItem):
            return NotImplemented
        return (self.phonetic_form == other.phonetic_form and self.features == other.features
                and self.agreement == other.agreement)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash((self.phonetic_form, self.features, tuple(sorted(self.agreement.items()))))

    def __repr__(self):
        return 'LexicalItem(%r, %r)' % (self.phonetic_form, self.feature_string())

    def __str__(self):
        if self.phonetic_form != '':
            form = self.phonetic_form
        else:
            form = u'ε'
        return form+" :: "+self.feature_string()
