#!/usr/bin/env python
# -*- coding: utf-8 -*-
import copy
from nltk import Tree
from mg_features import LexicalItem, LICENSEE

#operations recorded on derivation nodes
LEXICAL = 'Lex'
TRACE = 'Trace'
MERGE = 'Merge'
HEAD_MOVEMENT = 'HeadMove'
PAIR_MERGE = 'PairMerge'
LATE_MERGE = 'LateMerge'
MOVE = 'Move'
MULTIDOMINANCE = 'Multidominance'
#linear side of the non-head child: complements follow the head unless the selector asks for them on
#the left, specifiers precede it
RIGHT = 'right'
LEFT = 'left'
LEFT_COMPLEMENT = 'left_complement'


class IndexCounter(object):
    #hands out structural indices, reset by the parser at the start of every parse
    def __init__(self, start=0):
        self.start = start
        self.current_id = start

    def fresh(self):
        index = self.current_id
        self.current_id += 1
        return index

    def reset(self):
        self.current_id = self.start


class Chain(object):
    def __init__(self, head, tail=None, agreement=None, is_phase_head=False, mover=None):
        self.head = head
        #indices of the positions this chain has vacated
        self.tail = set(tail or [])
        if agreement == None:
            agreement = dict(head.agreement)
        self.agreement = agreement
        self.is_phase_head = is_phase_head
        #the displaced constituent, pronounced where the chain lands
        self.mover = mover

    def has_traces(self):
        return len(self.tail) > 0

    def __repr__(self):
        return 'Chain(%r, tail=%r)' % (self.head, sorted(self.tail))


class DerivationTree(object):
    def __init__(self, chain, children=None, index=0, is_adjunct=False, delayed_features=None,
                 is_phase=False, phase_completed=False, operation=LEXICAL, direction=None,
                 tokens=None, is_lexical=False):
        if children != None:
            children = tuple(children)
            if len(children) != 2:
                raise ValueError("derivation nodes have either no children or exactly two")
        if phase_completed and not is_phase:
            raise ValueError("only phase nodes can be completed")
        self.chain = chain
        self.children = children
        self.index = index
        self.is_adjunct = is_adjunct
        self.delayed_features = list(delayed_features or [])
        self.is_phase = is_phase
        self.phase_completed = phase_completed
        self.operation = operation
        self.direction = direction
        #positions of the input words this tree is built from
        self.tokens = frozenset(tokens or [])
        #true only for an unmerged item straight from the lexicon
        self.is_lexical = is_lexical

    @property
    def head(self):
        return self.chain.head

    @property
    def features(self):
        return self.chain.head.features

    @property
    def phonetic_form(self):
        return self.chain.head.phonetic_form

    def first_feature(self):
        return self.chain.head.first_feature()

    def is_leaf(self):
        return self.children == None

    def is_trace(self):
        return self.operation == TRACE

    def strip_feature(self):
        self.chain.head = self.chain.head.rest()

    def complete_phase(self):
        self.is_phase = True
        self.phase_completed = True

    def __repr__(self):
        return 'DerivationTree(%s, index=%d, op=%s)' % (self.chain.head, self.index, self.operation)


def make_leaf(item, index, token=None):
    tokens = []
    if token != None:
        tokens.append(token)
    return DerivationTree(Chain(item), index=index, delayed_features=item.delayed_features(),
                          is_phase=len(item.phase_features()) > 0, tokens=tokens, is_lexical=True)


def make_trace(index):
    return DerivationTree(Chain(LexicalItem('', ())), index=index, operation=TRACE)


def copy_tree(tree):
    return copy.deepcopy(tree)


def iter_nodes(tree, ancestors=()):
    #pre-order walk (mover, then left before right) yielding (node, ancestors, is_projection).. a
    #projection is the head child of its mother and shares its features
    stack = [(tree, ancestors, False)]
    while len(stack) > 0:
        (node, node_ancestors, is_projection) = stack.pop()
        yield (node, node_ancestors, is_projection)
        below = node_ancestors + (node,)
        pending = []
        if node.chain.mover != None:
            pending.append((node.chain.mover, below, False))
        if node.children != None:
            pending.append((node.children[0], below, False))
            pending.append((node.children[1], below, node.operation != MULTIDOMINANCE))
        stack.extend(reversed(pending))


def replace_node(root, target, replacement):
    #swaps target (found by identity) for replacement somewhere below root
    for (node, ancestors, is_projection) in iter_nodes(root):
        if node.chain.mover is target:
            node.chain.mover = replacement
            return True
        if node.children != None:
            if node.children[0] is target:
                node.children = (replacement, node.children[1])
                return True
            if node.children[1] is target:
                node.children = (node.children[0], replacement)
                return True
    return False


def collect_tokens(tree):
    #recomputes the token sets bottom up, needed after material has been moved out of a tree
    if tree.children == None and tree.chain.mover == None:
        return tree.tokens
    tokens = set()
    if tree.children == None:
        tokens.update(tree.tokens)
    if tree.chain.mover != None:
        tokens.update(collect_tokens(tree.chain.mover))
    if tree.children != None:
        for child in tree.children:
            tokens.update(collect_tokens(child))
    tree.tokens = frozenset(tokens)
    return tree.tokens


def contains_trace(tree):
    for (node, ancestors, is_projection) in iter_nodes(tree):
        if node.is_trace() or node.chain.has_traces():
            return True
    return False


def pending_licensees(tree):
    licensees = []
    for (node, ancestors, is_projection) in iter_nodes(tree):
        if is_projection:
            continue
        first = node.first_feature()
        if first != None and first.kind == LICENSEE:
            licensees.append(node)
    return licensees


def linearize(tree):
    #pronounced words in surface order.. traces are silent and moved constituents are pronounced in their
    #landing site only
    words = []
    if tree.chain.mover != None:
        words.extend(linearize(tree.chain.mover))
    if tree.children == None:
        #a leaf standing in for a moved chain is pronounced through its mover
        if not tree.is_trace() and tree.chain.mover == None:
            words.extend(tree.phonetic_form.split())
        return words
    (left, right) = tree.children
    if tree.direction == RIGHT:
        words.extend(linearize(right))
        words.extend(linearize(left))
    else:
        #the non-head child goes first
        words.extend(linearize(left))
        words.extend(linearize(right))
    return words


def generate_tree_signature(tree, with_indices=False):
    #structural signature used to stop identical trees entering the agenda twice.. fresh indices of
    #derived nodes are left out unless with_indices is set
    sig = tree.operation+"["
    if tree.is_leaf() or with_indices:
        sig += str(tree.index)+"; "
    sig += tree.phonetic_form+"; "+tree.head.feature_string()+"; "
    if tree.chain.tail:
        sig += "tail "+str(sorted(tree.chain.tail))+"; "
    if tree.delayed_features:
        sig += "delayed "+' '.join([str(f) for f in tree.delayed_features])+"; "
    if tree.is_adjunct:
        sig += "ADJ "
    if tree.phase_completed:
        sig += "COMPLETE "
    elif tree.is_phase:
        sig += "PHASE "
    if tree.direction != None:
        sig += tree.direction+" "
    if tree.chain.mover != None:
        sig += "mover "+generate_tree_signature(tree.chain.mover, with_indices)
    if tree.children != None:
        sig += generate_tree_signature(tree.children[0], with_indices)
        sig += generate_tree_signature(tree.children[1], with_indices)
    return sig+"]"


def trees_identical(tree1, tree2):
    return generate_tree_signature(tree1, True) == generate_tree_signature(tree2, True)


def node_label(tree):
    if tree.is_trace():
        return "t"+str(tree.index)
    feature_string = tree.head.feature_string()
    if tree.is_leaf():
        if tree.phonetic_form != '':
            form = tree.phonetic_form
        else:
            form = u'ε'
        return form+" :: "+feature_string
    if feature_string == '':
        return tree.operation
    return tree.operation+" "+feature_string


def to_nltk_tree(tree):
    if tree.is_leaf() and tree.chain.mover == None:
        return node_label(tree)
    daughters = []
    if tree.chain.mover != None:
        daughters.append(to_nltk_tree(tree.chain.mover))
    for child in tree.children or ():
        daughters.append(to_nltk_tree(child))
    return Tree(node_label(tree), daughters)


def derivation_bracketing(tree):
    nltk_tree = to_nltk_tree(tree)
    if isinstance(nltk_tree, Tree):
        return nltk_tree.pformat(margin=100000)
    return nltk_tree
