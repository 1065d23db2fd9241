import random

from cardsort.config import EngineConfig
from cardsort.models import CLASSIC_DOMAIN, Card
from cardsort.rules import RuleEngine

STIMULUS = Card("green", "circle", 3)  # color -> 1, shape -> 3, number -> 2
BY_RULE = {"color": 1, "shape": 3, "number": 2}
LEFTOVER = 0


def _answer(engine: RuleEngine, rule: str | None = None):
    return engine.evaluate(CLASSIC_DOMAIN, STIMULUS, BY_RULE[rule or engine.rule])


def test_initial_state() -> None:
    engine = RuleEngine(EngineConfig())
    assert engine.rule == "color"
    assert engine.prev_rule is None
    assert engine.consecutive_correct == 0
    assert engine.categories_completed == 0


def test_category_completes_on_threshold_and_switches_next_trial() -> None:
    engine = RuleEngine(EngineConfig())
    results = [_answer(engine, "color") for _ in range(10)]
    assert [result.consecutive_correct for result in results[:9]] == list(range(1, 10))
    last = results[-1]
    assert last.rule == "color"
    assert last.category_completed is True
    assert last.categories_completed == 1
    assert last.consecutive_correct == 0
    assert last.category_index == 0
    assert last.run_length == 10

    nxt = _answer(engine, "shape")
    assert nxt.rule == "shape"
    assert nxt.prev_rule == "color"
    assert nxt.is_shift_trial is True
    assert nxt.category_index == 1
    assert nxt.correct is True


def test_error_resets_streak_without_changing_rule() -> None:
    engine = RuleEngine(EngineConfig())
    for _ in range(6):
        _answer(engine, "color")
    result = engine.evaluate(CLASSIC_DOMAIN, STIMULUS, LEFTOVER)
    assert result.correct is False
    assert result.streak_before == 6
    assert result.consecutive_correct == 0
    assert engine.rule == "color"


def test_cyclic_policy_follows_rule_order() -> None:
    engine = RuleEngine(EngineConfig(threshold=1))
    rules = []
    for _ in range(7):
        rules.append(_answer(engine).rule)
    assert rules == ["color", "shape", "number", "color", "shape", "number", "color"]


def test_custom_rule_order() -> None:
    engine = RuleEngine(EngineConfig(threshold=1, rule_order=("number", "color", "shape")))
    assert [_answer(engine).rule for _ in range(4)] == ["number", "color", "shape", "number"]


def test_random_policy_never_repeats_completed_rule() -> None:
    engine = RuleEngine(EngineConfig(threshold=1, switch_policy="random"), random.Random(3))
    rules = [_answer(engine).rule for _ in range(50)]
    assert all(left != right for left, right in zip(rules, rules[1:]))
    assert set(rules) == {"color", "shape", "number"}


def test_random_policy_requires_rng() -> None:
    try:
        RuleEngine(EngineConfig(switch_policy="random"))
        raise AssertionError("Expected ValueError for random policy without rng.")
    except ValueError as exc:
        assert "needs a seeded rng" in str(exc)


def test_random_policy_is_reproducible_from_stream() -> None:
    config = EngineConfig(threshold=1, switch_policy="random")
    first = RuleEngine(config, random.Random("9:rules"))
    second = RuleEngine(config, random.Random("9:rules"))
    assert [_answer(first).rule for _ in range(20)] == [_answer(second).rule for _ in range(20)]


def test_only_trial_after_switch_is_shift_trial() -> None:
    engine = RuleEngine(EngineConfig(threshold=2))
    flags = [_answer(engine).is_shift_trial for _ in range(6)]
    assert flags == [False, False, True, False, True, False]


def test_prev_rule_index_reported_after_switch() -> None:
    engine = RuleEngine(EngineConfig(threshold=1))
    first = _answer(engine)
    second = _answer(engine)
    assert first.prev_rule_index is None
    assert second.prev_rule_index == BY_RULE["color"]
    assert second.expected_index == BY_RULE["shape"]
