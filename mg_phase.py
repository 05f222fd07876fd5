#!/usr/bin/env python
# -*- coding: utf-8 -*-
import logging
from mg_features import CATEGORIAL
from mg_derivation import MOVE, LEFT, RIGHT, LEFT_COMPLEMENT

logger = logging.getLogger(__name__)


class PhaseConfig(object):
    def __init__(self, enforce_pic=True, phase_heads=None, max_edge_elements=1, immediate_transfer=True):
        self.enforce_pic = enforce_pic
        if phase_heads == None:
            phase_heads = ['C', 'v', 'D']
        self.phase_heads = set(phase_heads)
        self.max_edge_elements = max_edge_elements
        self.immediate_transfer = immediate_transfer


class PhaseChecker(object):
    def __init__(self, config=None):
        if config == None:
            config = PhaseConfig()
        self.config = config

    def is_phase_head(self, node):
        #a transferred phase keeps its status after its category has been checked
        if node.is_phase or node.chain.is_phase_head or len(node.head.phase_features()) > 0:
            return True
        first = node.first_feature()
        return first != None and first.kind == CATEGORIAL and first.name in self.config.phase_heads

    def get_phase_edge(self, phase):
        #the specifiers and movers of the phase, found by walking down the projection line..
        #a complement is never part of the edge, whichever side it is pronounced on
        edge = []
        if not (phase.is_phase or self.is_phase_head(phase)):
            return edge
        node = phase
        while len(edge) < self.config.max_edge_elements and node.children != None:
            if node.operation == MOVE and node.chain.mover != None:
                edge.append(node.chain.mover)
                node = node.children[0]
            elif node.direction == LEFT:
                edge.append(node.children[0])
                node = node.children[1]
            else:
                break
        return edge

    def check_extraction(self, phase, target_index):
        if not self.config.enforce_pic or not phase.phase_completed:
            return True
        for element in self.get_phase_edge(phase):
            if element.index == target_index or target_index in element.chain.tail:
                return True
        logger.debug("PIC blocks extraction of node %d from the phase at %d", target_index, phase.index)
        return False

    def transfer_phase(self, tree):
        #embedded phases are completed too, whatever the status of the node above them
        if self.is_phase_head(tree):
            tree.complete_phase()
        if tree.children != None:
            for child in tree.children:
                self.transfer_phase(child)

    def phase_spine(self, tree):
        #phase heads met going down through complements, the successive-cyclic spine
        spine = []
        node = tree
        while node != None:
            if self.is_phase_head(node):
                spine.append(node)
            if node.children == None:
                break
            if node.operation == MOVE or node.direction in (RIGHT, LEFT_COMPLEMENT):
                node = node.children[0]
            else:
                node = node.children[1]
        return spine
