"""Tests for filter configuration, predicates and kana helpers."""

import json

import pytest
from glossrank.engine.filters import (
    FilterItem,
    FilterProfile,
    FormMatch,
    PartOfSpeechMatch,
    ReadingMatch,
    SourceIs,
    UsuallyKana,
    filter_from_dict,
    filter_to_dict,
    get_profile_filter,
    load_filter,
)
from glossrank.engine.kana import as_hiragana, is_kana
from glossrank.engine.models import (
    Context,
    Definition,
    DictionaryEntry,
    PartOfSpeech,
    Source,
    SourceKind,
)


def _entry(forms=("選ぶ",), readings=("えらぶ",), kind=SourceKind.JMDICT) -> DictionaryEntry:
    return DictionaryEntry(forms=forms, source=Source(kind, 1), readings=readings)


class TestPredicates:
    """Tests for the built-in predicates."""

    def test_pos_match(self):
        ctx = Context(word="選ぶ", reading="エラブ", pos=PartOfSpeech.VERB)
        assert PartOfSpeechMatch().matches(Definition("to choose", (PartOfSpeech.VERB,)), _entry(), ctx)
        assert not PartOfSpeechMatch().matches(Definition("choice", (PartOfSpeech.NOUN,)), _entry(), ctx)

    def test_usually_kana_needs_kana_word(self):
        uk = Definition("and then", (), ("&uk;",))
        kana_ctx = Context(word="そして", reading="ソシテ")
        kanji_ctx = Context(word="然して", reading="ソシテ")
        assert UsuallyKana().matches(uk, _entry(), kana_ctx)
        assert not UsuallyKana().matches(uk, _entry(), kanji_ctx)
        assert not UsuallyKana().matches(Definition("and then"), _entry(), kana_ctx)

    def test_reading_match_folds_katakana(self):
        ctx = Context(word="選ぶ", reading="エラブ")
        assert ReadingMatch().matches(Definition("x"), _entry(readings=("えらぶ",)), ctx)
        assert not ReadingMatch().matches(Definition("x"), _entry(readings=("せんぶ",)), ctx)

    def test_form_match(self):
        ctx = Context(word="選ぶ", reading="エラブ")
        assert FormMatch().matches(Definition("x"), _entry(forms=("選ぶ", "撰ぶ")), ctx)
        assert not FormMatch().matches(Definition("x"), _entry(forms=("撰ぶ",)), ctx)

    def test_source_is(self):
        ctx = Context(word="選ぶ", reading="エラブ")
        predicate = SourceIs(SourceKind.WANIKANI)
        assert predicate.matches(Definition("x"), _entry(kind=SourceKind.WANIKANI), ctx)
        assert not predicate.matches(Definition("x"), _entry(kind=SourceKind.JMDICT), ctx)

    def test_predicate_equality(self):
        assert PartOfSpeechMatch() == PartOfSpeechMatch()
        assert SourceIs(SourceKind.JMDICT) != SourceIs(SourceKind.WANIKANI)
        assert FilterItem(PartOfSpeechMatch(), 1) == FilterItem(PartOfSpeechMatch(), 1)


class TestFilterConfig:
    """Tests for building filters from JSON data."""

    def test_filter_from_dict(self):
        result = filter_from_dict({
            "tiers": [
                [{"predicate": "pos_match", "weight": 1}],
                [{"tag": "&arch;", "weight": -1}, {"predicate": "source", "value": "wanikani", "weight": 2}],
            ]
        })
        assert result == [
            [FilterItem(PartOfSpeechMatch(), 1)],
            [FilterItem("&arch;", -1), FilterItem(SourceIs(SourceKind.WANIKANI), 2)],
        ]

    def test_filter_to_dict_matches_input_form(self):
        data = {
            "tiers": [
                [{"predicate": "usually_kana", "weight": 1}],
                [{"predicate": "source", "value": "JMDict", "weight": -1}, {"tag": "&rare;", "weight": -1}],
            ]
        }
        assert filter_to_dict(filter_from_dict(data)) == data

    @pytest.mark.parametrize("data, message", [
        ([], "tiers"),
        ({"tiers": "x"}, "tiers"),
        ({"tiers": [{"tag": "&arch;"}]}, "tier 0"),
        ({"tiers": [["&arch;"]]}, "must be an object"),
        ({"tiers": [[{"tag": "&arch;"}]]}, "weight"),
        ({"tiers": [[{"tag": "&arch;", "weight": 1.5}]]}, "weight"),
        ({"tiers": [[{"tag": "&arch;", "weight": True}]]}, "weight"),
        ({"tiers": [[{"tag": "", "weight": 1}]]}, "non-empty"),
        ({"tiers": [[{"predicate": "eval", "weight": 1}]]}, "unknown predicate"),
        ({"tiers": [[{"predicate": "source", "weight": 1}]]}, "'value'"),
        ({"tiers": [[{"predicate": "source", "value": "Jisho", "weight": 1}]]}, "'value'"),
        ({"tiers": [[{"tag": "&arch;", "predicate": "pos_match", "weight": 1}]]}, "not both"),
    ])
    def test_invalid_filters(self, data, message):
        with pytest.raises(ValueError, match=message):
            filter_from_dict(data)

    def test_load_filter(self, tmp_path):
        path = tmp_path / "filter.json"
        path.write_text(json.dumps({"tiers": [[{"predicate": "form_match", "weight": 3}]]}), encoding="utf-8")
        assert load_filter(path) == [[FilterItem(FormMatch(), 3)]]

    def test_load_filter_invalid_json(self, tmp_path):
        path = tmp_path / "filter.json"
        path.write_text("{tiers:", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_filter(path)


class TestProfiles:
    """Tests for predefined filter profiles."""

    @pytest.mark.parametrize("profile", list(FilterProfile))
    def test_profiles_end_with_default_tiers(self, profile):
        assert get_profile_filter(profile)[-2:] == get_profile_filter(FilterProfile.DEFAULT)

    def test_profiles_are_fresh(self):
        first = get_profile_filter()
        first.append([])
        assert len(get_profile_filter()) == 2

    def test_default_penalizes_dated_senses(self):
        tags = {item.tag for item in get_profile_filter()[1]}
        assert tags == {"&arch;", "&obs;", "&rare;", "&obsc;"}


class TestKana:
    """Tests for kana helpers."""

    @pytest.mark.parametrize("word, expected", [
        ("そして", True),
        ("ソシテ", True),
        ("ラーメン", True),
        ("然して", False),
        ("abc", False),
        ("", False),
    ])
    def test_is_kana(self, word, expected):
        assert is_kana(word) is expected

    def test_as_hiragana(self):
        assert as_hiragana("ワレワレ") == "われわれ"
        assert as_hiragana("エラン") == "えらん"
        assert as_hiragana("我々ヲ") == "我々を"
        assert as_hiragana("ラーメン") == "らーめん"


class TestPartOfSpeech:
    """Tests for part-of-speech parsing."""

    def test_parse_known(self):
        assert PartOfSpeech.parse("AuxiliaryVerb") == PartOfSpeech.AUXILIARY_VERB

    def test_parse_misspelled_conjunction(self):
        assert PartOfSpeech.parse("Conjuction") == PartOfSpeech.CONJUNCTION

    def test_parse_unknown(self):
        assert PartOfSpeech.parse("Interjection") == PartOfSpeech.OTHER
