import pytest

from textpredict.normalize import (
    capitalize_lead, normalize_phrase, normalize_text, normalize_word,
    split_sentences, to_plain_text, tokenize,
)


def test_splits_on_punctuation_and_whitespace_in_order():
    assert tokenize("Hello, world!  How are   you?") == ["Hello", "world", "How", "are", "you"]


@pytest.mark.parametrize("text", ["", "...,;!?", "  \n\t ", "(--)"])
def test_empty_and_punctuation_only_input(text):
    assert tokenize(text) == []


def test_apostrophes_and_hyphens_inside_words_are_kept():
    assert tokenize("don't stop, well-known -- 'quoted'") == ["don't", "stop", "well-known", "quoted"]


def test_unicode_punctuation_splits_other_characters_pass_through():
    assert tokenize("café—naïve «déjà» 🙂ok") == ["café", "naïve", "déjà", "🙂ok"]


def test_lowercase_option_and_purity():
    text = "The Cat SAT"
    assert tokenize(text, lowercase=True) == ["the", "cat", "sat"]
    assert tokenize(text) == tokenize(text) == ["The", "Cat", "SAT"]


def test_split_sentences_on_terminator_followed_by_capital():
    text = "The cat sat. The cat ran! Did it? yes it did.\nThe end"
    assert split_sentences(text) == ["The cat sat.", "The cat ran!", "Did it? yes it did.", "The end"]


def test_split_sentences_trims_and_drops_empty():
    assert split_sentences("   ") == []
    assert split_sentences("  One.   Two.  ") == ["One.", "Two."]


def test_word_and_phrase_normalization():
    assert normalize_word("Hello,!") == "hello"
    assert normalize_word("Hello,!", lowercase=False) == "Hello"
    assert normalize_word("...") == ""
    assert normalize_phrase("the-cat,  sat!") == "the cat sat"
    assert normalize_text("  A   b\n c ") == "a b c"


def test_plain_text_flattens_sentence():
    assert to_plain_text("the cat - sat | on\nthe mat") == "The cat sat on the mat"
    assert to_plain_text("helloWorld") == "Hello World"


def test_capitalize_lead():
    assert capitalize_lead("cat") == "Cat"
    assert capitalize_lead("") == ""
