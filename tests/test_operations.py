"""Tests for the merge and move engines."""

from mg_features import LexicalItem, Categorial, Selector, Licensor
from mg_derivation import (
    Chain,
    DerivationTree,
    make_leaf,
    make_trace,
    linearize,
    MERGE,
    HEAD_MOVEMENT,
    PAIR_MERGE,
    LATE_MERGE,
    MOVE,
    LEFT,
    RIGHT,
    LEFT_COMPLEMENT,
)
from mg_phase import PhaseConfig
from mg_operations import apply_merge, apply_move, interarboreal_move
from mg_parser import ParserConfig


def leaf(form, features, index, token=None):
    return make_leaf(LexicalItem(form, features), index, token=token)


def merge(spec, head, config, counter):
    result = apply_merge(spec, head, config, counter)
    assert result is not None
    return result


def build_clause(subject, obj, config, counter, c_features="=T +wh C", saw_token=1):
    """subject saw obj, under a covert T and C."""
    vp = merge(obj, leaf("saw", "=D =D V", 2, token=saw_token), config, counter)
    vp = merge(subject, vp, config, counter)
    tp = merge(vp, leaf("", "=V T", 3), config, counter)
    return merge(tp, leaf("", c_features, 4), config, counter)


class TestStandardMerge:
    def test_head_selects_complement(self, config, counter):
        the = leaf("the", "=N D", 0, token=0)
        cat = leaf("cat", "N", 1, token=1)
        result = apply_merge(cat, the, config, counter)
        assert result.operation == MERGE
        assert result.features == (Categorial("D"),)
        assert result.phonetic_form == "the"
        assert result.direction == RIGHT
        assert result.tokens == frozenset([0, 1])
        assert result.index == 100
        assert linearize(result) == ["the", "cat"]
        (spec, head) = result.children
        assert spec.features == ()
        assert head.features == (Categorial("D"),)

    def test_inputs_are_left_untouched(self, config, counter):
        the = leaf("the", "=N D", 0, token=0)
        cat = leaf("cat", "N", 1, token=1)
        apply_merge(cat, the, config, counter)
        assert cat.features == (Categorial("N"),)
        assert the.features == (Selector("N"), Categorial("D"))

    def test_two_categorial_leaves_never_merge(self, config, counter):
        assert apply_merge(leaf("cat", "N", 0), leaf("dog", "N", 1), config, counter) is None

    def test_wrong_order_fails(self, config, counter):
        the = leaf("the", "=N D", 0, token=0)
        cat = leaf("cat", "N", 1, token=1)
        assert apply_merge(the, cat, config, counter) is None

    def test_later_merges_are_specifiers(self, config, counter):
        t_bar = merge(leaf("sleeps", "V", 2, token=2), leaf("", "=V =D T", 3), config, counter)
        tp = merge(leaf("John", "D", 0, token=0), t_bar, config, counter)
        assert tp.direction == LEFT
        assert linearize(tp) == ["John", "sleeps"]

    def test_covert_head_takes_the_form_of_its_complement(self, config, counter):
        t_bar = merge(leaf("sleeps", "V", 2, token=2), leaf("", "=V =D T", 3), config, counter)
        assert t_bar.phonetic_form == "sleeps"
        assert t_bar.features == (Selector("D"), Categorial("T"))

    def test_strong_selector_fuses_the_complement_into_the_head(self, config, counter):
        result = apply_merge(leaf("swim", "V", 1, token=1), leaf("can", "=>V T", 0, token=0), config, counter)
        assert result.operation == HEAD_MOVEMENT
        assert result.is_leaf()
        assert result.phonetic_form == "can swim"
        assert result.features == (Categorial("T"),)
        assert result.tokens == frozenset([0, 1])
        assert linearize(result) == ["can", "swim"]

    def test_fused_head_takes_specifiers(self, config, counter):
        fused = merge(leaf("swim", "V", 1, token=1), leaf("can", "=>V =D T", 0, token=0), config, counter)
        tp = merge(leaf("fish", "D", 2, token=2), fused, config, counter)
        assert linearize(tp) == ["fish", "can", "swim"]

    def test_left_complement(self, config, counter):
        vp = merge(leaf("Mary", "D", 1, token=1), leaf("saw", "D= =D V", 2, token=2), config, counter)
        assert vp.direction == LEFT_COMPLEMENT
        assert linearize(vp) == ["Mary", "saw"]
        vp = merge(leaf("John", "D", 0, token=0), vp, config, counter)
        assert vp.direction == LEFT
        assert linearize(vp) == ["John", "Mary", "saw"]

    def test_strong_selector_on_the_left(self, config, counter):
        result = merge(leaf("swim", "V", 1, token=1), leaf("can", "V<= T", 0, token=0), config, counter)
        assert result.operation == HEAD_MOVEMENT
        assert linearize(result) == ["swim", "can"]

    def test_constituent_that_still_has_to_move_is_not_fused(self, config, counter):
        vp = merge(leaf("what", "D -wh", 1, token=1), leaf("saw", "=D V", 0, token=0), config, counter)
        assert apply_merge(vp, leaf("", "=>V T", 2), config, counter) is None
        assert apply_merge(leaf("what", "V -wh", 3, token=2), leaf("", "=>V T", 2), config, counter) is None

    def test_agreement_clash_fails(self, config, counter):
        subject = leaf("cat", "D φ:num=sg", 0, token=0)
        verb = leaf("sleep", "=D V φ:num=pl", 1, token=1)
        assert apply_merge(subject, verb, config, counter) is None

    def test_agreement_is_unified(self, config, counter):
        subject = leaf("cats", "D φ:num=pl", 0, token=0)
        verb = leaf("sleep", "=D V φ:per=3", 1, token=1)
        result = apply_merge(subject, verb, config, counter)
        assert result.chain.agreement == {"num": "pl", "per": "3"}


class TestPairMerge:
    def test_adjunction(self, counter):
        config = ParserConfig(merge_strategies=["Standard", "PairMerge"])
        sleeps = leaf("sleeps", "V", 0, token=0)
        soundly = leaf("soundly", "≈V V", 1, token=1)
        result = apply_merge(sleeps, soundly, config, counter)
        assert result.operation == PAIR_MERGE
        assert result.children[0].is_adjunct
        assert not result.children[1].is_adjunct
        assert result.features == (Categorial("V"),)
        assert linearize(result) == ["sleeps", "soundly"]

    def test_disabled_by_default(self, config, counter):
        assert apply_merge(leaf("sleeps", "V", 0), leaf("soundly", "≈V V", 1), config, counter) is None

    def test_categories_must_match(self, counter):
        config = ParserConfig(merge_strategies=["Standard", "PairMerge"])
        assert apply_merge(leaf("cat", "N", 0), leaf("soundly", "≈V V", 1), config, counter) is None


class TestLateMerge:
    def test_delayed_feature_is_consumed(self, counter):
        config = ParserConfig(merge_strategies=["Standard", "LateMerge"])
        saw = leaf("saw", "=D[delay] V", 0, token=0)
        bill = leaf("Bill", "D", 1, token=1)
        result = apply_merge(bill, saw, config, counter)
        assert result.operation == LATE_MERGE
        assert result.delayed_features == []
        assert result.features == (Categorial("V"),)
        assert result.children[0].features == (Categorial("D"),)
        assert linearize(result) == ["saw", "Bill"]

    def test_disabled_by_default(self, config, counter):
        assert apply_merge(leaf("Bill", "D", 1), leaf("saw", "=D[delay] V", 0), config, counter) is None

    def test_agreement_clash_does_not_block(self, counter):
        config = ParserConfig(merge_strategies=["Standard", "LateMerge"])
        saw = leaf("saw", "=D[delay] V φ:num=sg", 0, token=0)
        cats = leaf("cats", "D φ:num=pl", 1, token=1)
        result = apply_merge(cats, saw, config, counter)
        assert result.chain.agreement == {"num": "sg"}

    def test_standard_merge_has_priority(self, counter):
        config = ParserConfig(merge_strategies=["Standard", "LateMerge"])
        saw = leaf("saw", "=D V", 0, token=0)
        saw.delayed_features = [Selector("D")]
        result = apply_merge(leaf("Bill", "D", 1, token=1), saw, config, counter)
        assert result.operation == MERGE
        assert result.delayed_features == [Selector("D")]


class TestPhasesInMerge:
    def test_completed_phase_blocks_merge(self, config, counter):
        c_bar = merge(leaf("", "T", 1), leaf("", "=T =D C ⚑C", 0), config, counter)
        assert c_bar.is_phase
        c_bar.phase_completed = True
        assert apply_merge(leaf("John", "D", 2, token=0), c_bar, config, counter) is None

    def test_open_phase_accepts_a_specifier(self, config, counter):
        c_bar = merge(leaf("", "T", 1), leaf("", "=T =D C ⚑C", 0), config, counter)
        c_bar.phase_completed = False
        assert apply_merge(leaf("John", "D", 2, token=0), c_bar, config, counter) is not None

    def test_completed_phase_is_open_without_pic(self, counter):
        config = ParserConfig(phase_config=PhaseConfig(enforce_pic=False))
        c_bar = merge(leaf("", "T", 1), leaf("", "=T =D C ⚑C", 0), config, counter)
        c_bar.phase_completed = True
        assert apply_merge(leaf("John", "D", 2, token=0), c_bar, config, counter) is not None

    def test_selected_phase_is_transferred(self, config, counter):
        result = merge(leaf("John", "D", 0, token=0), leaf("saw", "=D V", 1, token=1), config, counter)
        assert result.children[0].phase_completed

    def test_no_transfer_without_immediate_transfer(self, counter):
        config = ParserConfig(phase_config=PhaseConfig(immediate_transfer=False))
        result = merge(leaf("John", "D", 0, token=0), leaf("saw", "=D V", 1, token=1), config, counter)
        assert not result.children[0].phase_completed


class TestStandardMove:
    def test_wh_movement(self, config, counter):
        what = leaf("what", "D -wh", 0, token=2)
        cp = build_clause(leaf("John", "D", 1, token=0), what, config, counter)
        assert cp.first_feature() == Licensor("wh")
        result = apply_move(cp, config, counter)
        assert result.operation == MOVE
        assert result.phonetic_form == "what"
        assert result.features == (Categorial("C"),)
        assert result.chain.tail == set([0])
        assert result.chain.mover.features == ()
        assert linearize(result) == ["what", "John", "saw"]
        assert result.children[1].is_trace()

    def test_vacated_site_holds_a_trace(self, config, counter):
        what = leaf("what", "D -wh", 0, token=2)
        cp = build_clause(leaf("John", "D", 1, token=0), what, config, counter)
        result = apply_move(cp, config, counter)
        vp_bar = result.children[0].children[0].children[0].children[1]
        assert vp_bar.children[0].is_trace()
        assert vp_bar.children[0].index == 0

    def test_original_tree_is_left_untouched(self, config, counter):
        what = leaf("what", "D -wh", 0, token=2)
        cp = build_clause(leaf("John", "D", 1, token=0), what, config, counter)
        apply_move(cp, config, counter)
        assert linearize(cp) == ["John", "saw", "what"]
        assert cp.first_feature() == Licensor("wh")

    def test_needs_a_licensor(self, config, counter):
        dp = merge(leaf("cat", "N", 1), leaf("the", "=N D -wh", 0), config, counter)
        assert apply_move(dp, config, counter) is None

    def test_needs_a_matching_licensee(self, config, counter):
        cp = build_clause(leaf("John", "D", 1, token=0), leaf("Mary", "D", 0, token=2), config, counter)
        assert apply_move(cp, config, counter) is None

    def test_vacuous_movement_is_blocked_by_default(self, config, counter):
        cp = build_clause(leaf("who", "D -wh", 1, token=0), leaf("Mary", "D", 0, token=2), config, counter)
        assert apply_move(cp, config, counter) is None

    def test_vacuous_movement_when_allowed(self, counter):
        config = ParserConfig(allow_vacuous_movement=True)
        cp = build_clause(leaf("who", "D -wh", 1, token=0), leaf("Mary", "D", 0, token=2), config, counter)
        result = apply_move(cp, config, counter)
        assert linearize(result) == ["who", "saw", "Mary"]
        assert result.phonetic_form == "who"

    def test_remnant_movement(self, counter):
        remnant = DerivationTree(
            Chain(LexicalItem("y", "-top")),
            children=(make_trace(7), leaf("y", "", 8, token=1)),
            index=9,
            operation=MERGE,
            direction=LEFT,
            tokens=[1],
        )
        root = DerivationTree(
            Chain(LexicalItem("", "+top C")),
            children=(remnant, leaf("z", "", 10, token=0)),
            index=11,
            operation=MERGE,
            direction=RIGHT,
            tokens=[0, 1],
        )
        assert apply_move(root, ParserConfig(), counter) is None
        result = apply_move(root, ParserConfig(allow_remnant_movement=True), counter)
        assert result.chain.tail == set([9])
        assert linearize(result) == ["y", "z"]


class TestMoveAndPhases:
    def build_embedded(self, config, counter, what_features, embedded_c):
        what = leaf("what", what_features, 0, token=5)
        embedded = build_clause(leaf("Mary", "D", 1, token=3), what, config, counter, c_features=embedded_c, saw_token=4)
        if embedded.first_feature() == Licensor("wh"):
            embedded = apply_move(embedded, config, counter)
        thinks = merge(embedded, leaf("thinks", "=C =D V", 6, token=1), config, counter)
        vp = merge(leaf("John", "D", 7, token=0), thinks, config, counter)
        tp = merge(vp, leaf("", "=V T", 8), config, counter)
        return merge(tp, leaf("", "=T +wh C", 9), config, counter)

    def test_pic_blocks_extraction_from_a_completed_phase(self, config, counter):
        root = self.build_embedded(config, counter, "D -wh", "=T C")
        assert apply_move(root, config, counter) is None

    def test_extraction_without_pic(self, counter):
        config = ParserConfig(phase_config=PhaseConfig(enforce_pic=False))
        root = self.build_embedded(config, counter, "D -wh", "=T C")
        result = apply_move(root, config, counter)
        assert linearize(result) == ["what", "John", "thinks", "Mary", "saw"]

    def test_successive_cyclic_movement_through_the_edge(self, config, counter):
        root = self.build_embedded(config, counter, "D -wh -wh", "=T +wh C")
        result = apply_move(root, config, counter)
        assert result is not None
        assert linearize(result) == ["what", "John", "thinks", "Mary", "saw"]
        assert result.chain.tail == set([0])


class TestMoveStrategies:
    def build_topic_clause(self, config, counter):
        what = leaf("what", "D -wh", 0, token=2)
        return build_clause(leaf("Bill", "D -top", 1, token=0), what, config, counter, c_features="=T +wh +top C")

    def test_standard_moves_one_specifier(self, config, counter):
        result = apply_move(self.build_topic_clause(config, counter), config, counter)
        assert result.features == (Licensor("top"), Categorial("C"))
        assert linearize(result) == ["what", "Bill", "saw"]
        result = apply_move(result, config, counter)
        assert result.features == (Categorial("C"),)
        assert linearize(result) == ["Bill", "what", "saw"]

    def test_multi_specifier_moves_all_at_once(self, counter):
        config = ParserConfig(movement_strategies=["Standard", "MultiSpecifier"])
        result = apply_move(self.build_topic_clause(config, counter), config, counter)
        assert result.features == (Categorial("C"),)
        assert linearize(result) == ["Bill", "what", "saw"]

    def test_interarboreal(self, config, counter):
        attractor = leaf("", "+wh C", 1)
        mover = leaf("who", "-wh", 2, token=0)
        result = interarboreal_move(attractor, mover, config, counter)
        assert result.features == (Categorial("C"),)
        assert result.chain.tail == set([2])
        assert result.tokens == frozenset([0])
        assert linearize(result) == ["who"]

    def test_interarboreal_needs_matching_features(self, config, counter):
        attractor = leaf("", "+wh C", 1)
        assert interarboreal_move(attractor, leaf("Bill", "-top", 2), config, counter) is None

    def test_interarboreal_rejects_shared_tokens(self, config, counter):
        attractor = leaf("x", "+wh C", 1, token=0)
        assert interarboreal_move(attractor, leaf("who", "-wh", 2, token=0), config, counter) is None
