"""Unit tests for query tokenization and keyword scoring."""

import pytest

from hybrid_vectors.utils import extract_keywords, has_whole_word, keyword_relevance, trigger_overlap


class TestExtractKeywords:
    def test_lowercases_and_drops_short_tokens(self):
        assert extract_keywords("Deploy a  PostgreSQL DB") == ["deploy", "postgresql"]

    def test_punctuation_only_query_yields_nothing(self):
        assert extract_keywords("!!") == []
        assert extract_keywords("   ") == []

    def test_punctuation_is_kept_on_surviving_tokens(self):
        assert extract_keywords("pod!!") == ["pod!!"]

    def test_min_length_is_configurable(self):
        assert extract_keywords("go is fun", min_length=2) == ["go", "is", "fun"]


class TestWholeWord:
    def test_word_boundaries(self):
        assert has_whole_word("managed postgres database", "postgres")
        assert not has_whole_word("managed postgresql database", "postgres")

    def test_regex_characters_are_escaped(self):
        assert has_whole_word("use c++ here", "c++")
        assert has_whole_word("value (x) here", "(x)")


class TestTriggerOverlap:
    def test_either_direction(self):
        assert trigger_overlap("postgres", ["postgresql"])
        assert trigger_overlap("postgresql", ["postgres"])
        assert not trigger_overlap("redis", ["postgresql", "mysql"])

    def test_empty_triggers(self):
        assert not trigger_overlap("redis", [])
        assert not trigger_overlap("redis", [""])


class TestKeywordRelevance:
    def test_all_keywords_in_text_with_whole_word_bonus_is_capped(self):
        score = keyword_relevance("managed postgres database", [], ["postgres", "database"])
        assert score == 1.0

    def test_partial_match_without_whole_word(self):
        # "postgre" is a substring but not a whole word; "redis" is absent.
        score = keyword_relevance("managed postgresql", [], ["postgre", "redis"])
        assert score == pytest.approx(0.5)

    def test_whole_word_bonus(self):
        score = keyword_relevance("managed postgres", [], ["postgres", "redis"])
        assert score == pytest.approx(0.8)

    def test_trigger_only_match_gets_no_bonus(self):
        score = keyword_relevance("unrelated text", ["database"], ["database", "cache"])
        assert score == pytest.approx(0.5)

    def test_keyword_counted_once_for_text_and_trigger(self):
        score = keyword_relevance("storage class", ["storage"], ["storage", "volume", "disk"])
        assert score == pytest.approx(1 / 3 + 0.3)

    def test_no_match_scores_zero(self):
        assert keyword_relevance("network policy", ["ingress"], ["database"]) == 0.0

    def test_no_keywords_scores_zero(self):
        assert keyword_relevance("anything", [], []) == 0.0

    def test_bonus_is_configurable(self):
        score = keyword_relevance("managed postgres", [], ["postgres", "redis"], exact_match_bonus=0.1)
        assert score == pytest.approx(0.6)
