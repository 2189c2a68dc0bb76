import pytest
from loguru import logger

from kaomoji_replacer.kaomoji import DatasetStore, contains_tokens, create_engine
from kaomoji_replacer.kaomoji.replacer import select_candidate
from kaomoji_replacer.models import (
    KaomojiEntry,
    MatchCandidate,
    MatchKind,
    ReplaceOptions,
    ReplaceStrategy,
    ReplacementOutcome,
)
from kaomoji_replacer.utils.exceptions import InvalidConfigValueError


def test_replaces_exact_match(happy_engine) -> None:
    result = happy_engine.replace_text("hi [kaomoji:happy] there")
    assert result.text == "hi (^_^) there"
    assert result.success_count == 1
    assert result.failure_count == 0
    assert result.has_replacements
    assert result.records[0].outcome is ReplacementOutcome.REPLACED
    assert result.records[0].chosen_kaomoji == "(^_^)"


def test_not_found_kept(happy_engine) -> None:
    result = happy_engine.replace_text("[kaomoji:sad]", keep_original_on_not_found=True)
    assert result.text == "[kaomoji:sad]"
    assert result.failure_count == 1
    assert result.records[0].outcome is ReplacementOutcome.NOT_FOUND_KEPT


def test_not_found_marked(happy_engine) -> None:
    result = happy_engine.replace_text(
        "[kaomoji:sad]", keep_original_on_not_found=False, mark_not_found=True
    )
    assert result.text == "[?sad]"
    assert result.records[0].outcome is ReplacementOutcome.NOT_FOUND_MARKED


def test_not_found_removed_shrinks_by_token_length(happy_engine) -> None:
    text = "a [kaomoji:sad] b"
    result = happy_engine.replace_text(text, keep_original_on_not_found=False, mark_not_found=False)
    assert result.text == "a  b"
    assert len(text) - len(result.text) == len("[kaomoji:sad]")
    assert result.records[0].outcome is ReplacementOutcome.NOT_FOUND_REMOVED
    assert result.has_replacements
    assert result.success_count == 0


@pytest.mark.parametrize("text", ["", "plain text", "broken [kaomoji:happy", "[emoji:happy]"])
def test_text_without_tokens_is_unchanged(happy_engine, text) -> None:
    result = happy_engine.replace_text(text)
    assert result.text == text
    assert not result.has_replacements
    assert result.success_count == 0
    assert result.failure_count == 0
    assert result.records == ()


def test_offsets_stay_stable_across_mixed_outcomes(engine) -> None:
    text = "[kaomoji:zzz] one [kaomoji:happy] two [kaomoji:zzz] three [kaomoji:cry]"
    result = engine.replace_text(text, keep_original_on_not_found=False, mark_not_found=True)
    assert result.text == "[?zzz] one (^_^) two [?zzz] three (T_T)"
    assert result.success_count == 2
    assert result.failure_count == 2
    assert [r.raw_keyword for r in result.records] == ["zzz", "happy", "zzz", "cry"]
    assert all(text[r.start:r.end].startswith("[kaomoji:") for r in result.records)


def test_output_contains_no_tokens_after_success(engine) -> None:
    result = engine.replace_text("[kaomoji:happy][kaomoji:MAD] [kaomoji:sob]")
    assert result.success_count == 3
    assert not contains_tokens(result.text)


def test_fuzzy_replacement_records_kind(engine) -> None:
    result = engine.replace_text("[kaomoji:hapy]")
    record = result.records[0]
    assert result.text == "(^_^)"
    assert record.match_kind is MatchKind.FUZZY
    assert 0.3 < record.score < 1.0


def test_empty_store_marks_every_token_not_found() -> None:
    engine = create_engine(DatasetStore())
    result = engine.replace_text("[kaomoji:happy] [kaomoji:cry]")
    assert result.text == "[kaomoji:happy] [kaomoji:cry]"
    assert result.failure_count == 2
    assert {r.outcome for r in result.records} == {ReplacementOutcome.NOT_FOUND_KEPT}


def test_set_config_defaults_and_per_call_override(engine) -> None:
    engine.set_config(keep_original_on_not_found=False, mark_not_found=True)
    assert engine.replace_text("[kaomoji:zzz]").text == "[?zzz]"

    per_call = ReplaceOptions(keep_original_on_not_found=True)
    assert engine.replace_text("[kaomoji:zzz]", per_call).text == "[kaomoji:zzz]"
    assert engine.options.mark_not_found is True


def test_strategies_select_single_winner(engine) -> None:
    texts = {
        strategy: engine.replace_text("[kaomoji:hapy]", strategy=strategy).text
        for strategy in ("first", "best", "all")
    }
    assert set(texts.values()) == {"(^_^)"}


def test_threshold_override_turns_fuzzy_into_not_found(engine) -> None:
    result = engine.replace_text("[kaomoji:hapy]", threshold=0.95)
    assert result.records[0].outcome is ReplacementOutcome.NOT_FOUND_KEPT


def test_invalid_options_raise() -> None:
    with pytest.raises(InvalidConfigValueError):
        ReplaceOptions(strategy="random")
    with pytest.raises(InvalidConfigValueError):
        ReplaceOptions(threshold=1.5)
    assert ReplaceOptions(strategy="FIRST").strategy is ReplaceStrategy.FIRST


def test_result_to_dict(engine) -> None:
    result = engine.replace_text("[kaomoji:happy] [kaomoji:zzz]")
    data = result.to_dict()
    assert data["success_count"] == 1
    assert [r["outcome"] for r in data["records"]] == ["replaced", "not_found_kept"]
    assert [record.is_replaced for record in result.records] == [True, False]


def _candidate(keyword: str, score: float, kind: MatchKind) -> MatchCandidate:
    return MatchCandidate(KaomojiEntry(keyword, f"({keyword})"), score, kind)


def test_select_candidate_branches_on_strategy() -> None:
    fuzzy = _candidate("hapy", 0.8, MatchKind.FUZZY)
    exact = _candidate("happy", 1.0, MatchKind.EXACT)
    candidates = [fuzzy, exact]

    assert select_candidate(candidates, ReplaceStrategy.FIRST) is fuzzy
    assert select_candidate(candidates, ReplaceStrategy.BEST) is exact
    assert select_candidate(candidates, ReplaceStrategy.ALL) is exact
    assert select_candidate([], ReplaceStrategy.BEST) is None


def test_select_candidate_tie_keeps_dataset_order() -> None:
    exact = _candidate("happy", 1.0, MatchKind.EXACT)
    alias = _candidate("joy", 1.0, MatchKind.ALIAS)
    assert select_candidate([exact, alias], ReplaceStrategy.BEST) is exact
    assert select_candidate([alias, exact], ReplaceStrategy.BEST) is alias


def test_replace_text_leaves_engine_state_untouched(engine) -> None:
    options = engine.options
    first = engine.replace_text("[kaomoji:happy]")
    second = engine.replace_text("[kaomoji:happy]", strategy="first")
    assert first.text == second.text == "(^_^)"
    assert engine.options is options
    assert not hasattr(engine, "stats")


def test_removed_token_joining_neighbours_is_reported(happy_engine) -> None:
    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        result = happy_engine.replace_text(
            "[[kaomoji:zz]kaomoji:happy]", keep_original_on_not_found=False
        )
    finally:
        logger.remove(handler_id)

    # Результат не сканируется повторно
    assert result.text == "[kaomoji:happy]"
    assert len(result.records) == 1
    assert any("новый токен" in message for message in messages)


def test_kept_tokens_do_not_trigger_join_warning(happy_engine) -> None:
    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        result = happy_engine.replace_text("[kaomoji:happy] [kaomoji:zz]")
    finally:
        logger.remove(handler_id)

    assert result.text == "(^_^) [kaomoji:zz]"
    assert messages == []
