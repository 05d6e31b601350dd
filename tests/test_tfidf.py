"""Tests for tokenization, vocabulary construction and TF-IDF vectors."""

import math

import numpy as np
import pytest

from coauthor_cli.detectors.tfidf import Vocabulary, build_vocabulary, tokenize, vectorize


class TestTokenize:
    def test_identifiers_are_lowercased(self):
        assert tokenize("const MyValue_2") == ["const", "myvalue_2"]

    def test_multi_character_operators(self):
        assert tokenize("a => b == c != d <= e >= f && g || h") == [
            "a", "=>", "b", "==", "c", "!=", "d", "<=", "e", ">=", "f", "&&", "g", "||", "h",
        ]

    def test_structural_punctuation_kept(self):
        assert tokenize("f(a[0], b.c);{}") == [
            "f", "(", "a", "[", "0", "]", ",", "b", ".", "c", ")", ";", "{", "}",
        ]

    def test_other_characters_dropped(self):
        assert tokenize("x = y + z * 2 : 'q' #") == ["x", "y", "z", "2", "q"]

    @pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
    def test_empty_input(self, text):
        assert tokenize(text) == []

    def test_language_independent(self):
        assert tokenize("def hello(): return 1") == ["def", "hello", "(", ")", "return", "1"]
        assert tokenize("fn hello() -> i32 { 1 }") == ["fn", "hello", "(", ")", "i32", "{", "1", "}"]


class TestBuildVocabulary:
    def test_empty_corpus(self):
        vocab = build_vocabulary([])
        assert vocab.size == 0
        assert vocab.document_count == 0
        assert vocab.document_frequency == ()

    def test_first_seen_order(self):
        vocab = build_vocabulary(["b a", "c a"])
        assert vocab.token_index == {"b": 0, "a": 1, "c": 2}

    def test_token_index_is_read_only(self):
        vocab = build_vocabulary(["a b"])
        with pytest.raises(TypeError):
            vocab.token_index["c"] = 2
        assert vocab.size == 2

    def test_repeats_count_once_per_document(self):
        vocab = build_vocabulary(["a a a", "a b"])
        assert vocab.document_frequency[vocab.token_index["a"]] == 2
        assert vocab.document_frequency[vocab.token_index["b"]] == 1

    def test_frequency_length_matches_index(self):
        vocab = build_vocabulary(["x = 1;", "y = x;", "", "return y;"])
        assert len(vocab.document_frequency) == len(vocab.token_index)
        assert vocab.document_count == 4

    def test_frequencies_never_exceed_document_count(self, react_component, arithmetic):
        docs = react_component.split("\n") + arithmetic.split("\n")
        vocab = build_vocabulary(docs)
        assert max(vocab.document_frequency) <= len(docs)
        assert min(vocab.document_frequency) >= 1

    def test_accepts_generator(self):
        vocab = build_vocabulary(line for line in ["a", "b"])
        assert vocab.document_count == 2


class TestVectorize:
    def test_empty_vocabulary_gives_empty_vector(self):
        assert vectorize("const x = 1;", Vocabulary()).size == 0

    def test_blank_text_gives_zero_vector(self):
        vocab = build_vocabulary(["a b c"])
        vector = vectorize("   ", vocab)
        assert vector.shape == (3,)
        assert not vector.any()

    def test_length_matches_vocabulary(self):
        vocab = build_vocabulary(["a b", "c d e"])
        assert vectorize("a", vocab).shape == (vocab.size,)

    def test_weights(self):
        # N=2, df(a)=2, df(b)=1
        vocab = build_vocabulary(["a b", "a"])
        vector = vectorize("a a b", vocab)

        idf_a = math.log(3 / 3) + 1
        idf_b = math.log(3 / 2) + 1
        assert vector[vocab.token_index["a"]] == pytest.approx(2 / 3 * idf_a)
        assert vector[vocab.token_index["b"]] == pytest.approx(1 / 3 * idf_b)

    def test_token_in_every_document_keeps_weight_of_one(self):
        vocab = build_vocabulary(["a", "a", "a"])
        assert vectorize("a", vocab)[0] == pytest.approx(1.0)

    def test_unknown_tokens_ignored(self):
        vocab = build_vocabulary(["a b"])
        vector = vectorize("a zzz", vocab)
        # tf uses all tokens in the text, including the unknown one
        assert vector[vocab.token_index["a"]] == pytest.approx(0.5 * (math.log(2 / 2) + 1))
        assert vector[vocab.token_index["b"]] == 0.0

    def test_deterministic(self, react_component):
        vocab = build_vocabulary(react_component.split("\n"))
        first = vectorize(react_component, vocab)
        second = vectorize(react_component, vocab)
        assert np.array_equal(first, second)

    def test_entries_non_negative(self, react_component, arithmetic):
        vocab = build_vocabulary([react_component, arithmetic])
        assert (vectorize(arithmetic, vocab) >= 0).all()
