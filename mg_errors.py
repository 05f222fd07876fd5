#!/usr/bin/env python
# -*- coding: utf-8 -*-
#exceptions raised while building grammars and workspaces.. failures during the
#search itself are never raised, the parser just returns None and records why


class MGError(Exception):
    pass


class FeatureSyntaxError(MGError):
    def __init__(self, feature_string, reason=None):
        self.feature_string = feature_string
        self.reason = reason
        message = "Badly formed feature: '"+feature_string+"'"
        if reason != None:
            message += " ("+reason+")"
        MGError.__init__(self, message)


class UnregisteredFeatureError(MGError):
    #raised when a lexical entry uses a categorial or movement feature name that
    #has not been registered with the grammar
    def __init__(self, word, feature):
        self.word = word
        self.feature = feature
        MGError.__init__(self, "Unregistered feature "+str(feature)+" in the entry for '"+word+"'")


class LexiconError(MGError):
    pass


class WorkspaceError(MGError):
    pass
