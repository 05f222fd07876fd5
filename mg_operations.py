#!/usr/bin/env python
# -*- coding: utf-8 -*-
import logging
from mg_features import LexicalItem, Delayed, unify_agreement, CATEGORIAL, ADJUNCT_SELECTOR, LICENSOR
from mg_derivation import (Chain, DerivationTree, copy_tree, make_trace, iter_nodes, replace_node,
                           collect_tokens, contains_trace, pending_licensees, linearize, MERGE, HEAD_MOVEMENT,
                           PAIR_MERGE, LATE_MERGE, MOVE, LEFT, RIGHT, LEFT_COMPLEMENT)
from mg_phase import PhaseChecker

logger = logging.getLogger(__name__)

STANDARD = 'Standard'
MULTI_SPECIFIER = 'MultiSpecifier'
SIDEWARD = 'Sideward'
INTERARBOREAL = 'Interarboreal'
#strategies are tried in this order and the first one that applies wins
MERGE_PRIORITY = (STANDARD, PAIR_MERGE, LATE_MERGE)
#a root whose first feature is a licensor can only move, so moving all its licensors in one go
#never loses an analysis
MOVE_PRIORITY = (MULTI_SPECIFIER, STANDARD)


def get_checker(config, checker=None):
    if checker == None:
        checker = PhaseChecker(config.phase_config)
    return checker


def select(spec, checker):
    #a copy of the constituent about to be merged, transferred first if it is a phase
    spec = copy_tree(spec)
    if checker.config.enforce_pic and checker.config.immediate_transfer and checker.is_phase_head(spec):
        checker.transfer_phase(spec)
    return spec


def has_phase_feature(item):
    return len(item.phase_features()) > 0


def apply_merge(spec, head, config, counter, checker=None):
    checker = get_checker(config, checker)
    if checker.config.enforce_pic and head.is_phase and head.phase_completed:
        logger.debug("Cannot merge into the completed phase at %d", head.index)
        return None
    for strategy in MERGE_PRIORITY:
        if strategy not in config.merge_strategies:
            continue
        result = merge_rules[strategy](spec, head, counter, checker)
        if result != None:
            return result
    return None


def standard_merge(spec, head, counter, checker):
    head_feature = head.first_feature()
    if head_feature == None or not head_feature.matches(spec.first_feature()):
        return None
    agreement = unify_agreement(spec.chain.agreement, head.chain.agreement)
    if agreement == None:
        logger.debug("Agreement clash between %s and %s", spec.head, head.head)
        return None
    spec = select(spec, checker)
    spec.strip_feature()
    head_item = head.head.rest()
    tokens = spec.tokens | head.tokens
    if head_feature.triggers_head_movement():
        #incorporation: the selected constituent is spelled out inside the head itself, so nothing in
        #it may still be waiting to move
        if len(pending_licensees(spec)) > 0:
            logger.debug("Cannot fuse %s into %s, it still has to move", spec.head, head.head)
            return None
        if head_feature.selects_left():
            words = linearize(spec)+[head.phonetic_form]
        else:
            words = [head.phonetic_form]+linearize(spec)
        form = ' '.join([w for w in words if w != ''])
        item = LexicalItem(form, head_item.features, agreement)
        return DerivationTree(Chain(item, tail=head.chain.tail, agreement=agreement), index=head.index,
                              delayed_features=head.delayed_features, is_phase=has_phase_feature(item),
                              operation=HEAD_MOVEMENT, tokens=tokens)
    head = copy_tree(head)
    head.chain.head = head_item
    if not head.is_lexical:
        direction = LEFT
    elif head_feature.selects_left():
        direction = LEFT_COMPLEMENT
    else:
        direction = RIGHT
    head.is_lexical = False
    if head.phonetic_form != '':
        form = head.phonetic_form
    else:
        form = spec.phonetic_form
    item = LexicalItem(form, head_item.features, agreement)
    return DerivationTree(Chain(item, agreement=agreement, is_phase_head=head.chain.is_phase_head),
                          children=(spec, head), index=counter.fresh(), delayed_features=head.delayed_features,
                          is_phase=has_phase_feature(item), operation=MERGE, direction=direction, tokens=tokens)


def pair_merge(spec, head, counter, checker):
    head_feature = head.first_feature()
    spec_feature = spec.first_feature()
    if head_feature == None or spec_feature == None:
        return None
    if head_feature.kind != ADJUNCT_SELECTOR or spec_feature.kind != CATEGORIAL or head_feature.name != spec_feature.name:
        return None
    spec = select(spec, checker)
    spec.strip_feature()
    spec.is_adjunct = True
    head = copy_tree(head)
    head.strip_feature()
    head.is_lexical = False
    chain = Chain(head.head, tail=head.chain.tail, agreement=dict(head.chain.agreement),
                  is_phase_head=head.chain.is_phase_head)
    return DerivationTree(chain, children=(spec, head), index=counter.fresh(), delayed_features=head.delayed_features,
                          is_phase=has_phase_feature(head.head), operation=PAIR_MERGE, direction=LEFT,
                          tokens=spec.tokens | head.tokens)


def late_merge(spec, head, counter, checker):
    if len(head.delayed_features) == 0:
        return None
    delayed = head.delayed_features[0]
    if not delayed.matches(spec.first_feature()):
        return None
    agreement = unify_agreement(spec.chain.agreement, head.chain.agreement)
    if agreement == None:
        #late merged material keeps the host's agreement
        agreement = dict(head.chain.agreement)
    spec = select(spec, checker)
    head = copy_tree(head)
    head.delayed_features = head.delayed_features[1:]
    head.chain.head = head.head.without(Delayed(delayed))
    head.is_lexical = False
    if head.phonetic_form != '':
        form = head.phonetic_form
    else:
        form = spec.phonetic_form
    if delayed.selects_left():
        direction = LEFT_COMPLEMENT
    else:
        direction = RIGHT
    item = LexicalItem(form, head.features, agreement)
    return DerivationTree(Chain(item, agreement=agreement, is_phase_head=head.chain.is_phase_head),
                          children=(spec, head), index=counter.fresh(), delayed_features=head.delayed_features,
                          is_phase=has_phase_feature(item), operation=LATE_MERGE, direction=direction,
                          tokens=spec.tokens | head.tokens)


merge_rules = {STANDARD: standard_merge, PAIR_MERGE: pair_merge, LATE_MERGE: late_merge}


def find_licensee(tree, licensor):
    #pre-order search over maximal projections for the first constituent the licensor can attract
    for (node, ancestors, is_projection) in iter_nodes(tree):
        if node is tree or is_projection:
            continue
        if licensor.matches_move(node.first_feature()):
            return (node, ancestors)
    return (None, None)


def apply_move(tree, config, counter, checker=None):
    checker = get_checker(config, checker)
    for strategy in MOVE_PRIORITY:
        if strategy not in config.movement_strategies:
            continue
        result = move_rules[strategy](tree, config, counter, checker)
        if result != None:
            return result
    return None


def standard_move(tree, config, counter, checker):
    licensor = tree.first_feature()
    if licensor == None or licensor.kind != LICENSOR:
        return None
    if find_licensee(tree, licensor)[0] == None:
        return None
    original = tree
    tree = copy_tree(tree)
    (found, ancestors) = find_licensee(tree, licensor)
    if not config.allow_remnant_movement and contains_trace(found):
        logger.debug("Remnant movement of node %d is not allowed", found.index)
        return None
    for phase in ancestors:
        if not checker.check_extraction(phase, found.index):
            return None
    target_index = found.index
    replace_node(tree, found, make_trace(target_index))
    found.strip_feature()
    tree.strip_feature()
    collect_tokens(tree)
    item = LexicalItem(found.phonetic_form, tree.features, found.chain.agreement)
    chain = Chain(item, tail=set([target_index]) | found.chain.tail, agreement=dict(found.chain.agreement),
                  is_phase_head=tree.chain.is_phase_head, mover=found)
    root = DerivationTree(chain, children=(tree, make_trace(tree.index)), index=counter.fresh(),
                          delayed_features=tree.delayed_features, is_phase=tree.is_phase, operation=MOVE,
                          direction=LEFT, tokens=tree.tokens | found.tokens)
    if not config.allow_vacuous_movement and linearize(root) == linearize(original):
        logger.debug("Vacuous movement of node %d is not allowed", target_index)
        return None
    return root


def multi_specifier_move(tree, config, counter, checker):
    #keeps moving while the root still starts with a licensor, building several specifiers in one step
    result = standard_move(tree, config, counter, checker)
    while result != None:
        licensor = result.first_feature()
        if licensor == None or licensor.kind != LICENSOR:
            break
        next_result = standard_move(result, config, counter, checker)
        if next_result == None:
            break
        result = next_result
    return result


def interarboreal_move(tree, other, config, counter, checker=None):
    #attracts the root of a separate tree rather than something inside this one
    licensor = tree.first_feature()
    if licensor == None or not licensor.matches_move(other.first_feature()):
        return None
    if len(tree.tokens & other.tokens) > 0:
        return None
    tree = copy_tree(tree)
    mover = copy_tree(other)
    mover.strip_feature()
    tree.strip_feature()
    item = LexicalItem(mover.phonetic_form, tree.features, mover.chain.agreement)
    chain = Chain(item, tail=set([mover.index]) | mover.chain.tail, agreement=dict(mover.chain.agreement),
                  is_phase_head=tree.chain.is_phase_head, mover=mover)
    return DerivationTree(chain, children=(tree, make_trace(tree.index)), index=counter.fresh(),
                          delayed_features=tree.delayed_features, is_phase=tree.is_phase, operation=MOVE,
                          direction=LEFT, tokens=tree.tokens | mover.tokens)


move_rules = {STANDARD: standard_move, MULTI_SPECIFIER: multi_specifier_move}
