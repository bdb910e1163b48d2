import os

from smart_minutes.domain import (
    CorrectionRule,
    CorrectionRuleSet,
    FileCorrectionRuleSource,
    TranscriptCorrector,
    apply_corrections,
)


def _rules(*pairs):
    return [CorrectionRule(pattern=p, replacement=r) for p, r in pairs]


def test_replaces_whole_words_case_insensitively():
    rules = _rules(("young", "Yoong"))

    assert apply_corrections("Young said hello to young", rules) == "Yoong said hello to Yoong"


def test_does_not_touch_words_containing_the_pattern():
    rules = _rules(("young", "Yoong"))

    assert apply_corrections("younger minds stay youngish", rules) == "younger minds stay youngish"


def test_matches_next_to_punctuation():
    rules = _rules(("agender", "agenda"))

    assert apply_corrections("the agender, then (agender).", rules) == "the agenda, then (agenda)."


def test_rules_apply_in_declared_order():
    rules = _rules(("alpha", "beta"), ("beta", "gamma"))

    assert apply_corrections("alpha", rules) == "gamma"
    assert apply_corrections("alpha", list(reversed(rules))) == "beta"


def test_replacement_is_taken_literally():
    rules = _rules(("total", r"\1 $0 \g<0>"))

    assert apply_corrections("total", rules) == r"\1 $0 \g<0>"


def test_multi_word_pattern():
    rules = _rules(("motion carry", "motion carried"))

    assert apply_corrections("The Motion Carry unanimously", rules) == "The motion carried unanimously"


def test_correction_is_idempotent_for_shipped_rules():
    rules = _rules(("young", "Yoong"), ("minuets", "minutes"))
    once = apply_corrections("young read the minuets", rules)

    assert apply_corrections(once, rules) == once


def test_blank_pattern_is_rejected():
    try:
        CorrectionRule(pattern="  ", replacement="x")
    except ValueError:
        pass
    else:
        raise AssertionError("blank pattern accepted")


def test_corrector_uses_rules_from_file(corrector):
    assert corrector.correct("young set the agender") == "Yoong set the agenda"


def test_rule_file_is_reloaded_when_it_changes(rules_file):
    source = FileCorrectionRuleSource(rules_file)
    corrector = TranscriptCorrector(source)
    assert source.current().version == "test-1"

    rules_file.write_text(
        CorrectionRuleSet(
            version="test-2", rules=(CorrectionRule(pattern="young", replacement="Young"),)
        ).model_dump_json(),
        encoding="utf-8",
    )
    stat = rules_file.stat()
    os.utime(rules_file, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))

    assert source.current().version == "test-2"
    assert corrector.correct("young and the agender") == "Young and the agender"


def test_rule_set_is_cached_while_file_is_unchanged(rules_file):
    source = FileCorrectionRuleSource(rules_file)

    assert source.current() is source.current()
