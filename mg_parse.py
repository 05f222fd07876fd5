#!/usr/bin/env python
# -*- coding: utf-8 -*-
import sys
import json
import logging
import argparse
from timeit import default_timer
from mg_lexicon import load_grammar
from mg_phase import PhaseConfig
from mg_parser import MGParser, ParserConfig, time_taken
from mg_derivation import linearize, derivation_bracketing, PAIR_MERGE, LATE_MERGE
from mg_operations import STANDARD, MULTI_SPECIFIER, SIDEWARD, INTERARBOREAL
from mg_workspace import SIDEWARD_TYPES
from mg_errors import MGError

logger = logging.getLogger(__name__)


def build_config(args, lexicon):
    phase_heads = lexicon.phase_heads
    phase_config = PhaseConfig(enforce_pic=not args.no_pic, phase_heads=phase_heads,
                               max_edge_elements=args.max_edge_elements[0])
    return ParserConfig(max_derivation_depth=args.max_depth[0], allow_remnant_movement=args.allow_remnant,
                        allow_vacuous_movement=args.allow_vacuous, movement_strategies=args.move_strategies,
                        merge_strategies=args.merge_strategies, sideward_movement_types=args.sideward_types,
                        enable_parallel_workspaces=args.parallel_workspaces, max_workspaces=args.max_workspaces[0],
                        phase_config=phase_config, goal_category=args.goal[0], time_out=args.time_out[0],
                        lowercase=args.lowercase)


def read_sentences(args):
    sentences = list(args.sentences)
    if args.input_file != None:
        with open(args.input_file[0]) as input_file:
            for line in input_file:
                line = line.strip()
                if line != '':
                    sentences.append(line)
    return sentences


def mg_parse(args):
    try:
        lexicon = load_grammar(args.grammar[0])
    except MGError as e:
        sys.stderr.write("\nError!! "+str(e)+"\n")
        return 1
    parser = MGParser(lexicon, build_config(args, lexicon))
    parses = {}
    num_sents_parsed = 0
    sentences = read_sentences(args)
    start_time = default_timer()
    for sentence in sentences:
        tree = parser.parse(sentence)
        if tree == None:
            parses[sentence] = "No Parses Found"
            print(sentence+"\n    No Parses Found ("+'; '.join(parser.failure_messages)+")")
            continue
        num_sents_parsed += 1
        bracketing = derivation_bracketing(tree)
        parses[sentence] = {'linearization': linearize(tree), 'derivation': bracketing, 'rounds': parser.rounds}
        print(sentence+"\n    "+bracketing)
    logger.info("Number of sentences successfully parsed: %d/%d", num_sents_parsed, len(sentences))
    logger.info("Total time: %s", time_taken(default_timer()-start_time))
    if args.output_file != None:
        with open(args.output_file[0], 'w') as output_file:
            json.dump(parses, output_file, ensure_ascii=False, indent=2)
        logger.info("Saved parses in: %s", args.output_file[0])
    return 0


def get_cmd_parser():
    cmd_parser = argparse.ArgumentParser(description='MG parser command line arguments.')
    cmd_parser.add_argument('grammar', metavar='GRAMMAR', type=str, nargs=1, help='Specifies the JSON grammar file containing the lexicon and covert heads.')
    cmd_parser.add_argument('sentences', metavar='SENTENCE', type=str, nargs='*', help='Sentences to parse (in addition to any in the input file).')
    cmd_parser.add_argument('--input_file', dest='input_file', metavar='INPUT_FILE', type=str, nargs=1, default=None, help='Specifies a file containing one sentence per line.')
    cmd_parser.add_argument('--output_file', dest='output_file', metavar='OUTPUT_FILE', type=str, nargs=1, default=None, help='Specifies the name of the file to write the parses to (if a file with this name already exists, it will be overwritten).')
    cmd_parser.add_argument('--max_depth', dest='max_depth', metavar='N', type=int, nargs=1, default=[1000], help='Integer specifying the maximum number of search rounds (defaults to 1000).')
    cmd_parser.add_argument('--goal', dest='goal', metavar='CAT', type=str, nargs=1, default=['C'], help='Category a complete derivation must have (defaults to C).')
    cmd_parser.add_argument('--time_out', dest='time_out', metavar='T', type=float, nargs=1, default=[None], help='Number of seconds after which a parse is abandoned (defaults to no limit).')
    cmd_parser.add_argument('--max_edge_elements', dest='max_edge_elements', metavar='E', type=int, nargs=1, default=[1], help='Number of specifiers that stay accessible at a phase edge (defaults to 1).')
    cmd_parser.add_argument('--max_workspaces', dest='max_workspaces', metavar='W', type=int, nargs=1, default=[3], help='Maximum number of workspaces used for sideward movement (defaults to 3).')
    cmd_parser.add_argument('--merge', dest='merge_strategies', metavar='STRATEGY', type=str, nargs='+', choices=[STANDARD, PAIR_MERGE, LATE_MERGE], default=[STANDARD], help='Merge strategies to enable.')
    cmd_parser.add_argument('--move', dest='move_strategies', metavar='STRATEGY', type=str, nargs='+', choices=[STANDARD, MULTI_SPECIFIER, SIDEWARD, INTERARBOREAL], default=[STANDARD], help='Movement strategies to enable.')
    cmd_parser.add_argument('--sideward', dest='sideward_types', metavar='TYPE', type=str, nargs='+', choices=list(SIDEWARD_TYPES), default=[], help='Sideward movement types to enable.')
    cmd_parser.add_argument('--parallel_workspaces', dest='parallel_workspaces', action='store_true', help='Allow movers to be split off into parallel workspaces.')
    cmd_parser.add_argument('--no_pic', dest='no_pic', action='store_true', help='Switch off the Phase Impenetrability Condition.')
    cmd_parser.add_argument('--allow_remnant', dest='allow_remnant', action='store_true', help='Allow constituents containing traces to move.')
    cmd_parser.add_argument('--allow_vacuous', dest='allow_vacuous', action='store_true', help='Allow movement that leaves the word order unchanged.')
    cmd_parser.add_argument('--lowercase', dest='lowercase', action='store_true', help='Lowercase the input before lexical lookup.')
    cmd_parser.add_argument('--verbose', dest='verbose', action='store_true', help='Log every step of the search.')
    return cmd_parser


def main(argv=None):
    args = get_cmd_parser().parse_args(argv)
    if args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, format='%(message)s')
    return mg_parse(args)


if __name__ == '__main__':
    sys.exit(main())
