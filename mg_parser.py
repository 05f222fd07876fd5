#!/usr/bin/env python
# -*- coding: utf-8 -*-
import logging
import string
from timeit import default_timer
from nltk.tokenize import TreebankWordTokenizer
from fibonacci_heap_mod import Fibonacci_heap
from mg_features import Categorial, CATEGORIAL
from mg_derivation import (Chain, IndexCounter, make_leaf, make_trace, copy_tree, iter_nodes,
                           replace_node, collect_tokens, pending_licensees, linearize,
                           generate_tree_signature, LATE_MERGE)
from mg_phase import PhaseConfig, PhaseChecker
from mg_operations import (apply_merge, apply_move, interarboreal_move, STANDARD, SIDEWARD, INTERARBOREAL)
from mg_workspace import (WorkspaceRegistry, NUNES_STYLE, PARALLEL_DERIVATION, WHOLESALE_LATE_MERGER)
from mg_errors import WorkspaceError

logger = logging.getLogger(__name__)

UNKNOWN_WORD = 'unknown_word'
SEARCH_EXHAUSTED = 'search_exhausted'
punctuation = string.punctuation+"``"+"''"+"..."+"--"
tokenizer = TreebankWordTokenizer()


class ParserConfig(object):
    def __init__(self, max_derivation_depth=1000, allow_remnant_movement=False, allow_vacuous_movement=False,
                 movement_strategies=None, merge_strategies=None, sideward_movement_types=None,
                 enable_parallel_workspaces=False, max_workspaces=3, phase_config=None, goal_category='C',
                 time_out=None, lowercase=False):
        #max_derivation_depth bounds the number of search rounds, time_out (seconds) the wall clock
        self.max_derivation_depth = max_derivation_depth
        self.allow_remnant_movement = allow_remnant_movement
        self.allow_vacuous_movement = allow_vacuous_movement
        if movement_strategies == None:
            movement_strategies = [STANDARD]
        if merge_strategies == None:
            merge_strategies = [STANDARD]
        self.movement_strategies = set(movement_strategies)
        self.merge_strategies = set(merge_strategies)
        self.sideward_movement_types = set(sideward_movement_types or [])
        self.enable_parallel_workspaces = enable_parallel_workspaces
        self.max_workspaces = max_workspaces
        if phase_config == None:
            phase_config = PhaseConfig()
        self.phase_config = phase_config
        self.goal_category = goal_category
        self.time_out = time_out
        self.lowercase = lowercase


def with_unit(n, unit):
    if n == 1:
        return "1 "+unit
    return str(n)+" "+unit+"s"


def time_taken(seconds):
    #human readable duration for the progress log
    (hours, rest) = divmod(int(seconds), 3600)
    (mins, secs) = divmod(rest, 60)
    if hours != 0:
        return with_unit(hours, "hour")+", "+with_unit(mins, "minute")+" and "+with_unit(secs, "second")+".."
    elif mins != 0:
        return with_unit(mins, "minute")+" and "+with_unit(secs, "second")+".."
    elif secs == 0:
        return "less than a second.."
    return with_unit(secs, "second")+".."


def tokenize(sentence, lowercase=False):
    words = [w for w in tokenizer.tokenize(sentence) if w not in punctuation]
    if lowercase:
        words = [w.lower() for w in words]
    return words


def overlap(tree1, tree2):
    #two trees built from the same input word can never be combined
    return len(tree1.tokens & tree2.tokens) > 0


class MGParser(object):
    def __init__(self, lexicon, config=None):
        if config == None:
            config = ParserConfig()
        self.lexicon = lexicon
        self.config = config
        self.checker = PhaseChecker(config.phase_config)
        self.counter = IndexCounter()
        self.failure_kind = None
        self.failure_messages = []
        self.chart_size = 0
        self.rounds = 0

    def reset(self):
        self.counter.reset()
        self.agenda = Fibonacci_heap()
        self.agenda_size = 0
        self.sequence = 0
        self.agenda_signatures = set()
        self.seen = []
        self.failure_kind = None
        self.failure_messages = []
        self.chart_size = 0
        self.rounds = 0

    def fail(self, kind, message):
        self.failure_kind = kind
        self.failure_messages.append(message)
        logger.info(message)
        return None

    def add_to_agenda(self, tree):
        #trees are dequeued in the order they were built, which makes the search breadth first.. identical
        #trees are only ever added once
        signature = generate_tree_signature(tree)
        if signature in self.agenda_signatures:
            return False
        self.agenda_signatures.add(signature)
        self.agenda.enqueue(tree, self.sequence)
        self.sequence += 1
        self.agenda_size += 1
        return True

    def pop_agenda(self):
        entry = self.agenda.dequeue_min()
        self.agenda_size -= 1
        return entry.get_value()

    def seed(self, words):
        unknown_words = [w for w in words if w not in self.lexicon]
        if len(unknown_words) > 0:
            return unknown_words
        for position in range(len(words)):
            for item in self.lexicon.get_entries(words[position]):
                self.add_to_agenda(make_leaf(item, self.counter.fresh(), token=position))
        for item in self.lexicon.covert_entries():
            self.add_to_agenda(make_leaf(item, self.counter.fresh()))
        return []

    def check_goal(self, tree, words):
        head = tree.head
        if not head.is_saturated() or head.syntactic_features() != [Categorial(self.config.goal_category)]:
            return False
        if len(tree.tokens) != len(words) or linearize(tree) != words:
            return False
        #every licensee must have been checked somewhere in the derivation
        return len(pending_licensees(tree)) == 0

    def parse(self, sentence):
        if isinstance(sentence, str):
            words = tokenize(sentence, self.config.lowercase)
        else:
            words = list(sentence)
        self.reset()
        start_time = default_timer()
        logger.info("Parsing sentence: %s", ' '.join(words))
        if len(words) == 0:
            return self.fail(SEARCH_EXHAUSTED, "No sentence found")
        unknown_words = self.seed(words)
        if len(unknown_words) > 0:
            return self.fail(UNKNOWN_WORD, "No lexical entries for: "+', '.join(unknown_words))
        logger.debug("Inserted %d axioms into the agenda", self.agenda_size)
        deadline = None
        if self.config.time_out != None:
            deadline = start_time+self.config.time_out
        while self.agenda_size > 0 and self.rounds < self.config.max_derivation_depth:
            if deadline != None and default_timer() > deadline:
                return self.fail(SEARCH_EXHAUSTED, "Timed out after "+time_taken(default_timer()-start_time))
            self.rounds += 1
            tree = self.pop_agenda()
            if self.check_goal(tree, words):
                logger.info("Derivation found after %d rounds in %s", self.rounds, time_taken(default_timer()-start_time))
                return tree
            self.expand(tree)
            self.seen.append(tree)
            self.chart_size = len(self.seen)
            if self.chart_size % 5000 == 0:
                logger.info("Current number of chart entries: %d", self.chart_size)
        if self.agenda_size > 0:
            message = "No derivation found within "+str(self.config.max_derivation_depth)+" rounds"
        else:
            message = "No derivation found, the search space is exhausted"
        logger.info("Final chart size: %d", self.chart_size)
        return self.fail(SEARCH_EXHAUSTED, message)

    def expand(self, tree):
        config = self.config
        for other in self.seen:
            if overlap(tree, other):
                continue
            for (spec, head) in ((other, tree), (tree, other)):
                result = apply_merge(spec, head, config, self.counter, self.checker)
                if result != None:
                    self.add_to_agenda(result)
            if INTERARBOREAL in config.movement_strategies:
                for (attractor, mover) in ((tree, other), (other, tree)):
                    result = interarboreal_move(attractor, mover, config, self.counter, self.checker)
                    if result != None:
                        self.add_to_agenda(result)
            if SIDEWARD in config.movement_strategies:
                for result in self.sideward_candidates(tree, other):
                    self.add_to_agenda(result)
        result = apply_move(tree, config, self.counter, self.checker)
        if result != None:
            self.add_to_agenda(result)
        if SIDEWARD in config.movement_strategies and config.enable_parallel_workspaces:
            for result in self.parallel_candidates(tree):
                self.add_to_agenda(result)

    def sideward_candidates(self, tree, other):
        results = []
        types = self.config.sideward_movement_types
        for (source, target) in ((tree, other), (other, tree)):
            if NUNES_STYLE in types:
                results.extend(self.nunes_candidates(source, target))
            if WHOLESALE_LATE_MERGER in types and LATE_MERGE in self.config.merge_strategies:
                result = self.late_merger_candidate(source, target)
                if result != None:
                    results.append(result)
        return results

    def nunes_candidates(self, source, target):
        #copies a constituent the target can select out of the source, leaving a trace behind
        selector = target.first_feature()
        if selector == None:
            return []

        def merge(spec, head):
            return apply_merge(spec, head, self.config, self.counter, self.checker)

        for (node, ancestors, is_projection) in iter_nodes(source):
            if node is source or is_projection or not selector.matches(node.first_feature()):
                continue
            registry = WorkspaceRegistry(self.config.max_workspaces)
            source_id = registry.new_workspace()
            target_id = registry.new_workspace()
            registry.add_tree(source_id, copy_tree(source))
            registry.add_tree(target_id, copy_tree(target))
            chain = Chain(node.head, tail=[node.index], agreement=dict(node.chain.agreement), mover=node)
            if registry.sideward_move(source_id, target_id, chain, NUNES_STYLE, merge=merge) != None:
                return [registry.get_tree_mut(target_id), registry.get_tree_mut(source_id)]
        return []

    def late_merger_candidate(self, source, target):
        feature = source.first_feature()
        if feature == None or feature.kind != CATEGORIAL:
            return None
        if any([f.name == feature.name for f in target.delayed_features]):
            return None
        registry = WorkspaceRegistry(self.config.max_workspaces)
        source_id = registry.new_workspace()
        target_id = registry.new_workspace()
        registry.add_tree(source_id, source)
        registry.add_tree(target_id, copy_tree(target))
        if registry.sideward_move(source_id, target_id, Chain(source.head), WHOLESALE_LATE_MERGER) == None:
            return None
        return registry.get_tree_mut(target_id)

    def parallel_candidates(self, tree):
        #splits a constituent that still has to move off into its own workspace, where it waits to be
        #attracted from another tree
        if PARALLEL_DERIVATION not in self.config.sideward_movement_types:
            return []
        residue = copy_tree(tree)
        licensees = [node for node in pending_licensees(residue) if node is not residue]
        if len(licensees) == 0:
            return []
        mover = licensees[0]
        registry = WorkspaceRegistry(self.config.max_workspaces)
        source_id = registry.new_workspace()
        registry.add_tree(source_id, residue)
        #the licensee stays on the stand-in leaf, which is what gets attracted later
        displaced = copy_tree(mover)
        displaced.strip_feature()
        chain = Chain(mover.head, tail=[mover.index], agreement=dict(mover.chain.agreement), mover=displaced)
        try:
            parallel_id = registry.sideward_move(source_id, source_id, chain, PARALLEL_DERIVATION)
        except WorkspaceError as e:
            logger.debug(str(e))
            return []
        if parallel_id == None:
            return []
        replace_node(residue, mover, make_trace(mover.index))
        collect_tokens(residue)
        return [residue, registry.get_tree_mut(parallel_id)]


def parse(sentence, lexicon, config=None):
    return MGParser(lexicon, config).parse(sentence)
