"""
Composer tests: contexts, variables, invariants and event reconciliation
across several pattern models.
"""

import pytest

from patgen.a_parse.pattern_model import Context
from patgen.b_compose.composer import PatternComposer, derive_name, events_equivalent
from patgen.errors import EmptyInput, VariableTypeConflict

from .factories import event, pattern


@pytest.fixture
def composer() -> PatternComposer:
    return PatternComposer()


def names(model):
    return [e.name for e in model.events]


# =============================================================================
# NAMING & EMPTY INPUT
# =============================================================================

class TestNaming:

    def test_empty_input_is_rejected(self, composer):
        with pytest.raises(EmptyInput):
            composer.compose([])

    def test_first_specific_name_wins(self):
        assert derive_name([pattern("Pattern"), pattern("  "), pattern("PSend"), pattern("PPacket")]) == "PSend_Composite"

    def test_fallback_name(self):
        assert derive_name([pattern("Pattern"), pattern("pattern")]) == "PatternComposite"


# =============================================================================
# CONTEXT / VARIABLES / INVARIANTS
# =============================================================================

class TestStaticParts:

    def test_context_union_preserves_first_seen_order(self, composer):
        a = pattern("A", context=Context(sets=["ND"], constants=["range"]))
        b = pattern("B", context=Context(sets=["ND", "PKT"], axioms=["range ⊆ ND × ND"]))
        result = composer.compose([a, b])
        assert result.context == Context(sets=["ND", "PKT"], constants=["range"], axioms=["range ⊆ ND × ND"])

    def test_context_absent_when_all_empty(self, composer):
        result = composer.compose([pattern("A"), pattern("B", context=Context())])
        assert result.context is None

    def test_variable_type_conflict_fails(self, composer):
        a = pattern("A", variables=[("count", "NAT")])
        b = pattern("B", variables=[("count", "INT")])
        with pytest.raises(VariableTypeConflict) as excinfo:
            composer.compose([a, b])
        assert excinfo.value.name == "count"
        assert excinfo.value.existing_type == "NAT"
        assert excinfo.value.incoming_type == "INT"

    def test_identical_variables_are_merged(self, composer):
        a = pattern("A", variables=[("count", "NAT"), ("flag", "BOOL")])
        b = pattern("B", variables=[("count", "NAT")])
        result = composer.compose([a, b])
        assert [(v.name, v.type) for v in result.variables] == [("count", "NAT"), ("flag", "BOOL")]

    def test_invariants_dedup_on_trimmed_text(self, composer):
        a = pattern("A", invariants=[" count ≥ 0", "flag ∈ BOOL"])
        b = pattern("B", invariants=["count ≥ 0 "])
        result = composer.compose([a, b])
        assert [i.expression for i in result.invariants] == ["count ≥ 0", "flag ∈ BOOL"]


# =============================================================================
# EVENTS
# =============================================================================

class TestEvents:

    def test_init_events_are_merged_and_placed_first(self, composer):
        a = pattern("A", events=[event("tick", "A"), event("Initialisation", "A", actions=["a ≔ 0"])])
        b = pattern("B", events=[event("INITIALISATION", "B", actions=["a ≔ 0", "b ≔ 1"])])
        result = composer.compose([a, b])
        assert names(result) == ["Initialisation", "tick"]
        init = result.events[0]
        assert init.source_pattern == "Composite"
        assert [x.assignment for x in init.actions] == ["a ≔ 0", "b ≔ 1"]

    def test_init_event_present_without_sources(self, composer):
        result = composer.compose([pattern("A", events=[event("tick", "A")])])
        assert result.events[0].name == "Initialisation"
        assert result.events[0].actions == []

    def test_name_collision_without_rule_gets_suffix(self, composer):
        a = pattern("PClock", events=[event("tick", "PClock", params=[("t", "NAT")])])
        b = pattern("PTimer", events=[event("tick", "PTimer", params=[("t", "NAT"), ("d", "NAT")])])
        result = composer.compose([a, b])
        assert names(result) == ["Initialisation", "tick", "tick_2"]
        assert result.events[1].source_pattern == "PClock"
        assert result.events[2].source_pattern == "PTimer"
        assert [p.name for p in result.events[2].params] == ["t", "d"]

    def test_structurally_identical_events_collapse(self, composer):
        a = pattern("PClock", events=[event("tick", "PClock", guards=["t > 0"], actions=["c ≔ t"])])
        b = pattern("PTimer", events=[event("tick", "PTimer", guards=[" t > 0"], actions=["c ≔ t "])])
        result = composer.compose([a, b])
        assert names(result) == ["Initialisation", "tick"]
        assert result.events[1].source_pattern == "PClock"

    def test_suffix_skips_names_already_taken(self, composer):
        a = pattern("A", events=[event("Tick", "A", guards=["g1"])])
        b = pattern("B", events=[event("tick_2", "B", guards=["g2"]), event("tick", "B", guards=["g3"])])
        result = composer.compose([a, b])
        assert names(result) == ["Initialisation", "Tick", "tick_2", "tick_3"]

    def test_source_pattern_defaults_to_model_name(self, composer):
        """Events without a source take the owning model's name, which lets rules match."""
        models = [
            pattern("PSend", events=[event("start_tx")]),
            pattern("PNDBuffer", events=[event("remove_ndBuff")]),
            pattern("PPacket", events=[event("set_pktFwdr")]),
        ]
        result = composer.compose(models)
        assert names(result) == ["Initialisation", "start_tx"]
        assert result.events[1].source_pattern == "PSend+PNDBuffer+PPacket"

    def test_events_are_copied_and_trimmed(self, composer):
        original = event("tick", "A", params=[(" t ", " NAT "), ("", "X")], guards=[" t > 0 ", "  "], actions=[" c ≔ t"])
        model = pattern("A", events=[original])
        result = composer.compose([model])
        copied = result.events[1]
        assert copied is not original
        assert [(p.name, p.type) for p in copied.params] == [("t", "NAT")]
        assert [g.expr for g in copied.guards] == ["t > 0"]
        assert [a.assignment for a in copied.actions] == ["c ≔ t"]
        assert original.guards[0].expr == " t > 0 "


def test_events_equivalent_compares_positionally():
    a = event("tick", "A", guards=["g1", "g2"])
    b = event("tick", "B", guards=["g2", "g1"])
    assert not events_equivalent(a, b)
    assert events_equivalent(a, event("tick", "C", guards=["g1", "g2"]))
