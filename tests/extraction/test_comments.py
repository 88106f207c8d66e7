"""Tests for the comment flattener."""

from __future__ import annotations

import pytest

from msgscan.core.errors import ConfigurationError, ErrorCode, MalformedCommentError
from msgscan.extraction.comments import MAX_COMMENT_DEPTH, CommentConfig, flatten

PROPS = {"props": ("{", "}")}


@pytest.fixture
def payload(call_args):
    """The first argument of ``t(...)`` for an object literal source."""

    def _payload(obj: str):
        (arg,) = call_args(f"t({obj})")
        assert arg.type == "object"
        return arg

    return _payload


class TestBuckets:
    """Lines are grouped plain, other-keyed, prop-braced, deep-keyed."""

    def test_bucket_order(self, payload) -> None:
        node = payload("{k: {k2: 'K'}, props: {p: 'P'}, other: 'O', comment: 'C'}")

        lines = flatten(node, CommentConfig(props=PROPS), text="Foo")

        assert lines == ["C", "other: O", "{p}: P", "k.k2: K"]

    def test_multiline_values_yield_one_line_each(self, payload) -> None:
        node = payload("{comment: 'first\\nsecond', props: {name: 'a\\nb'}}")

        lines = flatten(node, CommentConfig(props=PROPS), text="Foo")

        assert lines == ["first", "second", "{name}: a", "{name}: b"]

    def test_custom_comment_key_and_brackets(self, payload) -> None:
        node = payload("{note: 'N', vars: {count: 'how many'}, comment: 'not plain'}")
        config = CommentConfig(comment_key="note", props={"vars": ("%", "%")})

        lines = flatten(node, config, text="Foo")

        assert lines == ["N", "comment: not plain", "%count%: how many"]

    def test_nested_object_inside_prop_is_deep_keyed(self, payload) -> None:
        node = payload("{props: {user: {name: 'U'}}}")

        lines = flatten(node, CommentConfig(props=PROPS), text="Foo")

        assert lines == ["props.user.name: U"]

    def test_concatenated_values_are_folded(self, payload) -> None:
        node = payload("{comment: 'Hello ' + 'world'}")

        assert flatten(node, CommentConfig(), text="Foo") == ["Hello world"]

    def test_shorthand_and_spread_are_ignored(self, payload) -> None:
        node = payload("{comment: 'C', shorthand, ...rest}")

        assert flatten(node, CommentConfig(), text="Foo") == ["C"]

    def test_string_keys(self, payload) -> None:
        node = payload("{'comment': 'C', 'ui-hint': 'H'}")

        assert flatten(node, CommentConfig(), text="Foo") == ["C", "ui-hint: H"]


class TestMalformed:
    """Values that are neither text nor object."""

    def test_raises_with_dotted_key(self, payload) -> None:
        node = payload("{props: {count: 3}}")

        with pytest.raises(MalformedCommentError) as exc_info:
            flatten(node, CommentConfig(props=PROPS), text="Apple", context="fruit")

        assert exc_info.value.code is ErrorCode.MALFORMED_COMMENT
        assert exc_info.value.details == {"key": "props.count", "text": "Apple", "context": "fruit"}

    def test_skipped_when_not_throwing(self, payload) -> None:
        node = payload("{comment: 'C', count: n, ui: {max: 20, min: '1'}}")
        config = CommentConfig(throw_when_malformed=False)

        assert flatten(node, config, text="Foo") == ["C", "ui.min: 1"]

    def test_too_deep(self, payload) -> None:
        depth = MAX_COMMENT_DEPTH + 2
        node = payload("{a: " * depth + "'x'" + "}" * depth)

        with pytest.raises(MalformedCommentError) as exc_info:
            flatten(node, CommentConfig(), text="Foo")

        assert exc_info.value.code is ErrorCode.COMMENT_TOO_DEEP


class TestCommentConfig:
    """Props validation."""

    @pytest.mark.parametrize(
        "props",
        [
            {"props": ("{",)},
            {"props": "{}"},
            {"props": ("{", 1)},
            {"props": ("{", "}", "!")},
        ],
    )
    def test_invalid_props(self, props) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            CommentConfig(props=props)

        assert exc_info.value.code is ErrorCode.INVALID_PROPS

    def test_lists_are_accepted(self) -> None:
        config = CommentConfig(props={"props": ["[", "]"]})

        assert config.props == {"props": ("[", "]")}
