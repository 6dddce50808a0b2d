import asyncio
import json
import random

import pytest

from core.config import ConfigError
from core.constants import ReplyMode
from responders.engine import AutoResponderEngine


def _rule(rule_id, triggers, reply, **extra):
    data = {"id": rule_id, "triggers": triggers, "action": {"replies": [reply]}}
    data.update(extra)
    return data


def _config(*rules, **settings):
    return {"settings": settings, "rules": list(rules)}


def test_first_matching_rule_wins(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("first", ["hello*"], "one"),
        _rule("second", ["hello world"], "two"),
    ))
    action = engine.evaluate(make_ctx("hello world"))
    assert action.rule_id == "first"
    assert action.content == "one"


def test_later_rule_fires_when_earlier_is_cooling_down(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("first", ["hello*"], "one", cooldownMs=5000),
        _rule("second", ["hello*"], "two", cooldownMs=5000),
    ))
    assert engine.evaluate(make_ctx("hello")).rule_id == "first"
    assert engine.evaluate(make_ctx("hello")).rule_id == "second"
    assert engine.evaluate(make_ctx("hello")) is None


def test_cooldown_per_user(make_engine, make_ctx, clock):
    engine = make_engine(_config(_rule("greet", ["hi"], "hey", cooldownMs=5000, per="user")))
    assert engine.evaluate(make_ctx("hi", author_id="1")) is not None
    clock.advance(2000)
    assert engine.evaluate(make_ctx("hi", author_id="1")) is None
    assert engine.evaluate(make_ctx("hi", author_id="2")) is not None
    clock.advance(3000)
    assert engine.evaluate(make_ctx("hi", author_id="1")) is not None


def test_disabled_rule_is_skipped(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("off", ["hi"], "no", enabled=False),
        _rule("on", ["hi"], "yes"),
    ))
    assert engine.evaluate(make_ctx("hi")).rule_id == "on"


def test_word_bounds_use_truncated_text(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("short", ["*"], "short", maxWords=2),
        maxMessageLength=7,
    ))
    # truncated to "one two"
    assert engine.evaluate(make_ctx("one two three four")).rule_id == "short"


def test_min_words(make_engine, make_ctx):
    engine = make_engine(_config(_rule("long", ["*"], "long", minWords=3)))
    assert engine.evaluate(make_ctx("one two")) is None
    assert engine.evaluate(make_ctx("one two three")) is not None


def test_matching_uses_truncated_text(make_engine, make_ctx):
    engine = make_engine(_config(_rule("exact", ["hello"], "x", match="exact"), maxMessageLength=5))
    action = engine.evaluate(make_ctx("hello there"))
    assert action is not None
    assert action.rule_id == "exact"


def test_content_placeholder_uses_full_message_text(make_engine, make_ctx):
    engine = make_engine(_config(_rule("echo", ["*"], "{content}"), maxMessageLength=3))
    assert engine.evaluate(make_ctx("abcdef")).content == "abcdef"


def test_scope_filter_applies(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("vip", ["hi"], "vip", where={"allowRoles": ["8"]}),
        _rule("all", ["hi"], "all", where={"denyChannels": ["13"]}),
    ))
    assert engine.evaluate(make_ctx("hi", role_ids=frozenset({"8"}))).rule_id == "vip"
    assert engine.evaluate(make_ctx("hi", author_id="2")).rule_id == "all"
    assert engine.evaluate(make_ctx("hi", author_id="3", channel_id="13")) is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"author_is_bot": True},
        {"guild_id": None},
        {"content": "   "},
        {"content": "!hi"},
        {"content": "hi https://example.com"},
    ],
)
def test_global_ignores(make_engine, make_ctx, overrides):
    engine = make_engine(_config(
        _rule("any", ["*"], "x"),
        ignorePrefixes=["!"],
        ignoreURLs=True,
    ))
    assert engine.evaluate(make_ctx(**{"content": "hi", **overrides})) is None


def test_bots_and_dms_allowed_when_configured(make_engine, make_ctx):
    engine = make_engine(_config(_rule("any", ["*"], "x"), ignoreBots=False, ignoreDMs=False))
    assert engine.evaluate(make_ctx("hi", author_is_bot=True)) is not None
    assert engine.evaluate(make_ctx("hi", author_id="9", guild_id=None)) is not None


def test_action_carries_mention_policy(make_engine, make_ctx):
    engine = make_engine(_config({
        "id": "a",
        "triggers": ["hi"],
        "action": {
            "mode": "send",
            "mentionAuthor": False,
            "allowedMentions": {"users": True, "roles": True, "everyone": False},
            "deleteTriggerMessage": True,
            "replies": ["Hi {mention}"],
        },
    }))
    action = engine.evaluate(make_ctx("hi", author_id="42"))
    assert action.mode == ReplyMode.SEND
    assert action.content == "Hi <@42>"
    assert action.mentions.user_ids == ("42",)
    assert action.mentions.roles is True
    assert action.mentions.everyone is False
    assert action.mentions.replied_user is False
    assert action.delete_trigger_message is True


def test_reply_choice_is_deterministic_with_seed(make_ctx):
    config = _config({"id": "a", "triggers": ["*"], "cooldownMs": 0, "action": {"replies": list("abcdefgh")}})
    runs = []
    for _ in range(2):
        engine = AutoResponderEngine(rng=random.Random(99))
        engine.reload(config)
        runs.append([engine.evaluate(make_ctx("go")).content for _ in range(6)])
    assert runs[0] == runs[1]


def test_engines_do_not_share_cooldowns(make_ctx, clock):
    config = _config(_rule("a", ["hi"], "x", cooldownMs=60000))
    first = AutoResponderEngine(clock=clock)
    second = AutoResponderEngine(clock=clock)
    first.reload(config)
    second.reload(config)
    assert first.evaluate(make_ctx("hi")) is not None
    assert second.evaluate(make_ctx("hi")) is not None


def test_failed_reload_keeps_previous_rules(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["hi"], "x")))
    before = engine.rule_set
    with pytest.raises(ConfigError):
        engine.reload("not a document")
    assert engine.rule_set is before
    assert engine.evaluate(make_ctx("hi")) is not None


def test_reload_swaps_rules_and_matchers(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["hi"], "old", cooldownMs=0)))
    assert engine.evaluate(make_ctx("hi")).content == "old"
    engine.reload(_config(_rule("a", ["bye"], "new", cooldownMs=0)))
    assert engine.evaluate(make_ctx("hi")) is None
    assert engine.evaluate(make_ctx("bye")).content == "new"


def test_reload_with_one_bad_rule_of_ten(make_engine, make_ctx):
    rules = [_rule(f"r{i}", [f"word{i}"], f"reply{i}") for i in range(10)]
    rules[3] = {"id": "r3", "triggers": [], "action": {"replies": ["x"]}}
    engine = make_engine(_config(*rules))
    assert len(engine.rule_set) == 9
    assert engine.evaluate(make_ctx("word3")) is None
    assert engine.evaluate(make_ctx("word7")).content == "reply7"


def test_bad_regex_rule_is_neutralized(make_engine, make_ctx):
    engine = make_engine(_config(
        _rule("bad", ["(oops"], "bad", match="regex"),
        _rule("good", ["*oops*"], "good"),
    ))
    assert engine.evaluate(make_ctx("(oops")).rule_id == "good"


def test_reload_from_file(tmp_path, make_ctx):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(_config(_rule("file", ["hi"], "from file"))), encoding="utf-8")
    engine = AutoResponderEngine()
    rule_set = asyncio.run(engine.reload_from_file(path))
    assert [rule.id for rule in rule_set.rules] == ["file"]
    assert engine.evaluate(make_ctx("hi")).content == "from file"


def test_process_delivers_action(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["hi"], "hello")))
    delivered = []

    async def deliver(action):
        delivered.append(action)

    assert asyncio.run(engine.process(make_ctx("hi"), deliver)) is True
    assert [action.content for action in delivered] == ["hello"]
    assert asyncio.run(engine.process(make_ctx("nope"), deliver)) is False
    assert len(delivered) == 1


def test_delivery_failure_keeps_cooldown(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["hi"], "hello", cooldownMs=5000)))
    calls = []

    async def broken(action):
        calls.append(action)
        raise RuntimeError("network down")

    assert asyncio.run(engine.process(make_ctx("hi"), broken)) is False
    assert asyncio.run(engine.process(make_ctx("hi"), broken)) is False
    assert len(calls) == 1


def test_negative_cooldown_never_blocks(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["hi"], "x", cooldownMs=-1)))
    assert engine.evaluate(make_ctx("hi")) is not None
    assert engine.evaluate(make_ctx("hi")) is not None


def test_fractional_word_bounds_are_not_rounded(make_engine, make_ctx):
    engine = make_engine(_config(_rule("a", ["*"], "x", minWords=2.5, maxWords=3.5, cooldownMs=0)))
    assert engine.evaluate(make_ctx("one two")) is None
    assert engine.evaluate(make_ctx("one two three")) is not None
    assert engine.evaluate(make_ctx("one two three four")) is None
