import random

from responders.rendering import pick_reply, render_template


def test_render_known_tokens(make_ctx):
    ctx = make_ctx(content="ok", author_id="42", author_name="alice")
    text = render_template("Hi {mention}, you said: {content} {foo}", ctx)
    assert text == "Hi <@42>, you said: ok {foo}"


def test_render_every_occurrence(make_ctx):
    ctx = make_ctx(content="x", author_id="7", author_name="bob")
    text = render_template("{username}/{userid}/{username}/{userid}", ctx)
    assert text == "bob/7/bob/7"


def test_render_missing_values_become_empty(make_ctx):
    ctx = make_ctx(content="", author_name="")
    assert render_template("[{username}][{content}]", ctx) == "[][]"


def test_render_is_repeatable(make_ctx):
    ctx = make_ctx(content="same")
    template = "{mention} {content} {username}"
    assert render_template(template, ctx) == render_template(template, ctx)


def test_pick_reply_empty():
    assert pick_reply(()) is None


def test_pick_reply_is_seedable():
    replies = ("a", "b", "c", "d")
    first = [pick_reply(replies, random.Random(3)) for _ in range(5)]
    second = [pick_reply(replies, random.Random(3)) for _ in range(5)]
    assert first == second
    assert set(first) <= set(replies)
