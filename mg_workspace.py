#!/usr/bin/env python
# -*- coding: utf-8 -*-
import logging
from mg_errors import WorkspaceError
from mg_features import Selector, CATEGORIAL
from mg_derivation import (Chain, DerivationTree, copy_tree, make_trace, iter_nodes, replace_node,
                           collect_tokens, MULTIDOMINANCE, LEFT)

logger = logging.getLogger(__name__)

NUNES_STYLE = 'NunesStyle'
PARALLEL_DERIVATION = 'ParallelDerivation'
MULTIDOMINANCE_TYPE = 'Multidominance'
WHOLESALE_LATE_MERGER = 'WholesaleLateMerger'
SIDEWARD_TYPES = (NUNES_STYLE, PARALLEL_DERIVATION, MULTIDOMINANCE_TYPE, WHOLESALE_LATE_MERGER)


class Workspace(object):
    def __init__(self, ID, tree=None, active=True):
        self.ID = ID
        self.tree = tree
        self.active = active


class WorkspaceRegistry(object):
    def __init__(self, max_workspaces=3):
        self.max_workspaces = max_workspaces
        self.workspaces = {}
        self.next_id = 0

    def new_workspace(self):
        if len(self.workspaces) >= self.max_workspaces:
            raise WorkspaceError("Cannot open more than "+str(self.max_workspaces)+" workspaces")
        ID = self.next_id
        self.next_id += 1
        self.workspaces[ID] = Workspace(ID)
        return ID

    def has_capacity(self):
        return len(self.workspaces) < self.max_workspaces

    def get_workspace(self, ID):
        if ID not in self.workspaces:
            raise WorkspaceError("No such workspace: "+str(ID))
        return self.workspaces[ID]

    def add_tree(self, ID, tree):
        workspace = self.get_workspace(ID)
        if not workspace.active:
            return False
        workspace.tree = tree
        return True

    def get_tree(self, ID):
        #a copy, so callers cannot disturb the workspace by accident
        tree = self.get_workspace(ID).tree
        if tree == None:
            return None
        return copy_tree(tree)

    def get_tree_mut(self, ID):
        return self.get_workspace(ID).tree

    def activate(self, ID):
        self.get_workspace(ID).active = True

    def deactivate(self, ID):
        self.get_workspace(ID).active = False

    def active_workspaces(self):
        return [ID for ID in sorted(self.workspaces) if self.workspaces[ID].active]

    def transfer_tree(self, from_id, to_id):
        source = self.get_workspace(from_id)
        target = self.get_workspace(to_id)
        if source.tree == None or not target.active:
            return False
        target.tree = copy_tree(source.tree)
        source.tree = None
        return True

    def copy_tree(self, from_id):
        source = self.get_workspace(from_id)
        if source.tree == None:
            raise WorkspaceError("Workspace "+str(from_id)+" is empty")
        ID = self.new_workspace()
        self.workspaces[ID].tree = copy_tree(source.tree)
        return ID

    def sideward_move(self, source_id, target_id, chain, movement_type, merge=None):
        #returns the id of the workspace holding the result, or None when the movement does not apply
        source = self.get_workspace(source_id)
        target = self.get_workspace(target_id)
        if source.tree == None or target.tree == None:
            return None
        if movement_type == NUNES_STYLE:
            return self.nunes_style(source, target, chain, merge)
        elif movement_type == PARALLEL_DERIVATION:
            return self.parallel_derivation(chain)
        elif movement_type == MULTIDOMINANCE_TYPE:
            return self.multidominance(source, target, chain)
        elif movement_type == WHOLESALE_LATE_MERGER:
            return self.wholesale_late_merger(target, chain)
        raise WorkspaceError("Unknown sideward movement type: "+str(movement_type))

    def nunes_style(self, source, target, chain, merge):
        #the mover is copied out of the source, which keeps a trace in its place, and merged with the
        #target's tree
        if merge == None or chain.mover == None:
            return None
        mover = None
        for (node, ancestors, is_projection) in iter_nodes(source.tree):
            if node is not source.tree and node.index == chain.mover.index and not node.is_trace():
                mover = node
                break
        if mover == None:
            return None
        merged = merge(copy_tree(chain.mover), target.tree)
        if merged == None:
            return None
        replace_node(source.tree, mover, make_trace(mover.index))
        collect_tokens(source.tree)
        target.tree = merged
        return target.ID

    def parallel_derivation(self, chain):
        if not self.has_capacity():
            logger.debug("No room for a parallel workspace")
            return None
        ID = self.new_workspace()
        tokens = []
        if chain.mover != None:
            tokens = chain.mover.tokens
        leaf_chain = Chain(chain.head, tail=chain.tail, agreement=dict(chain.agreement),
                           is_phase_head=chain.is_phase_head, mover=chain.mover)
        self.workspaces[ID].tree = DerivationTree(leaf_chain, index=min(chain.tail or [0]), tokens=tokens)
        return ID

    def multidominance(self, source, target, chain):
        #one node over both trees, standing in for a constituent with two mothers
        tree = DerivationTree(Chain(target.tree.head, tail=chain.tail, agreement=dict(target.tree.chain.agreement)),
                              children=(source.tree, target.tree), index=target.tree.index,
                              delayed_features=target.tree.delayed_features, is_phase=target.tree.is_phase,
                              operation=MULTIDOMINANCE, direction=LEFT,
                              tokens=source.tree.tokens | target.tree.tokens)
        target.tree = tree
        return target.ID

    def wholesale_late_merger(self, target, chain):
        #nothing is merged yet, the target just learns to select the chain later on
        feature = chain.head.first_feature()
        if feature == None:
            return None
        if feature.kind == CATEGORIAL:
            feature = Selector(feature.name)
        target.tree.delayed_features.append(feature)
        return target.ID

    def merge_workspaces(self, ws1, ws2, combine):
        #combine decides how the two trees come together.. when it fails neither workspace is touched
        workspace1 = self.get_workspace(ws1)
        workspace2 = self.get_workspace(ws2)
        if workspace1.tree == None or workspace2.tree == None:
            return False
        combined = combine(workspace1.tree, workspace2.tree)
        if combined == None:
            return False
        workspace1.tree = combined
        workspace2.tree = None
        return True
