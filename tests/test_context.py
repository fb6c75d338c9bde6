"""
Tests for context memory: interaction recall, context scoring and
pattern learning.
"""

import math

import pytest

from reasoning.context import ContextMemory


@pytest.fixture
def memory():
    return ContextMemory(pattern_decay=1.0, max_pattern_weight=None)


class TestFindSimilarInteraction:

    def test_empty_memory(self, memory):
        assert memory.find_similar_interaction(["go"]) == (None, 0.0)

    def test_no_keywords(self, memory):
        memory.learn_from_interaction("q", "a", ["go"], 1.0)
        assert memory.find_similar_interaction([]) == (None, 0.0)

    def test_full_overlap_scores_one(self, memory):
        memory.learn_from_interaction("q", "a", ["channel", "buffer"], 0.0)
        interaction, score = memory.find_similar_interaction(["channel", "buffer"])
        assert interaction.answer == "a"
        assert score == pytest.approx(1.0)

    def test_normalized_by_query_keywords(self, memory):
        memory.learn_from_interaction("q", "a", ["channel"], 0.0)
        _, score = memory.find_similar_interaction(["channel", "buffer", "select", "close"])
        assert score == pytest.approx(0.25)

    def test_case_insensitive(self, memory):
        memory.learn_from_interaction("q", "a", ["Channel"], 0.0)
        _, score = memory.find_similar_interaction(["CHANNEL"])
        assert score == pytest.approx(1.0)

    def test_duplicates_inflate_count(self, memory):
        memory.learn_from_interaction("q", "a", ["go", "go"], 0.0)
        _, score = memory.find_similar_interaction(["go"])
        assert score == pytest.approx(2.0)

    def test_tie_keeps_earliest(self, memory):
        memory.learn_from_interaction("first", "a1", ["go"], 0.0)
        memory.learn_from_interaction("second", "a2", ["go"], 0.0)
        interaction, _ = memory.find_similar_interaction(["go"])
        assert interaction.question == "first"

    def test_better_match_wins(self, memory):
        memory.learn_from_interaction("first", "a1", ["go"], 0.0)
        memory.learn_from_interaction("second", "a2", ["go", "channel"], 0.0)
        interaction, score = memory.find_similar_interaction(["go", "channel"])
        assert interaction.question == "second"
        assert score == pytest.approx(1.0)


class TestEvaluateContext:

    def test_empty_keywords_is_zero(self, memory):
        score = memory.evaluate_context([])
        assert score == 0.0
        assert not math.isnan(score)

    def test_unknown_keywords_score_zero(self, memory):
        assert memory.evaluate_context(["go", "rust"]) == 0.0

    def test_mean_of_weights(self, memory):
        memory.learn_from_interaction("q", "a", ["go"], 2.0)
        # go -> 0.2, rust -> 0
        assert memory.evaluate_context(["go", "rust"]) == pytest.approx(0.1)

    def test_weights_are_case_sensitive(self, memory):
        memory.learn_from_interaction("q", "a", ["Go"], 1.0)
        assert memory.evaluate_context(["go"]) == 0.0


class TestLearnFromInteraction:

    def test_appends_interaction(self, memory):
        interaction = memory.learn_from_interaction("q", "a", ["go"], 0.5)
        assert len(memory) == 1
        assert memory.interactions[0] is interaction
        assert interaction.keywords == ("go",)
        assert interaction.score == 0.5

    def test_increments_by_tenth_of_score(self, memory):
        memory.learn_from_interaction("q", "a", ["go", "channel"], 1.0)
        memory.learn_from_interaction("q", "a", ["go"], 1.0)
        assert memory.pattern_weight("go") == pytest.approx(0.2)
        assert memory.pattern_weight("channel") == pytest.approx(0.1)

    def test_zero_score_keeps_weight(self, memory):
        memory.learn_from_interaction("q", "a", ["go"], 0.0)
        assert memory.pattern_weight("go") == 0.0
        assert memory.patterns == {"go": 0.0}

    def test_repeated_reinforcement_is_monotonic(self):
        memory = ContextMemory(pattern_decay=0.5, max_pattern_weight=1.0)
        previous = 0.0
        for _ in range(30):
            memory.learn_from_interaction("q", "a", ["go"], 1.0)
            weight = memory.pattern_weight("go")
            assert weight >= previous
            previous = weight
        assert previous == pytest.approx(1.0)


class TestBounds:

    def test_ring_buffer_evicts_oldest(self):
        memory = ContextMemory(capacity=2)
        for i in range(3):
            memory.learn_from_interaction(f"q{i}", "a", ["go"], 0.0)
        assert [i.question for i in memory.interactions] == ["q1", "q2"]

    def test_absent_keywords_decay(self):
        memory = ContextMemory(pattern_decay=0.5, max_pattern_weight=None)
        memory.learn_from_interaction("q", "a", ["go"], 1.0)
        memory.learn_from_interaction("q", "a", ["rust"], 1.0)
        assert memory.pattern_weight("go") == pytest.approx(0.05)
        assert memory.pattern_weight("rust") == pytest.approx(0.1)

    def test_tiny_weights_are_forgotten(self):
        memory = ContextMemory(pattern_decay=0.01, max_pattern_weight=None)
        memory.learn_from_interaction("q", "a", ["go"], 0.0001)
        memory.learn_from_interaction("q", "a", ["rust"], 1.0)
        assert "go" not in memory.patterns

    def test_weight_cap(self):
        memory = ContextMemory(max_pattern_weight=0.15)
        memory.learn_from_interaction("q", "a", ["go"], 1.0)
        memory.learn_from_interaction("q", "a", ["go"], 1.0)
        assert memory.pattern_weight("go") == pytest.approx(0.15)

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            ContextMemory(capacity=0)
        with pytest.raises(ValueError):
            ContextMemory(pattern_decay=0.0)


def test_clear_and_stats(memory):
    memory.learn_from_interaction("q", "a", ["go"], 1.0)
    stats = memory.get_stats()
    assert stats['interactions'] == 1
    assert stats['patterns'] == 1
    assert stats['top_patterns'][0]['keyword'] == "go"

    memory.clear()
    assert len(memory) == 0
    assert memory.patterns == {}
