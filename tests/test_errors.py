"""Tests for the aggregate failure report."""

import pytest
from graph_helpers import Rule, run

from bindgraph import ConversionError, ConverterError, Direction, Key, Request, build_graph, converter_error
from bindgraph._graph import Artifact, CanConvert


def _graph_with_errors():
    return run(
        ["A", "B", "C", "ok"],
        [
            Rule("A", deps=("zeta",)),
            Rule("B", deps=("alpha",)),
            Rule("C", deps=("ok",)),
            Rule("zeta", error="use of unexported name"),
            Rule("alpha", error="use of generic declaration"),
        ],
    )[0]


class TestConverterError:
    def test_no_errors(self) -> None:
        graph, _ = run(["A"], [])
        assert converter_error(graph) is None
        assert ConverterError.from_graph(graph) is None

    def test_summary_names_smallest_key(self) -> None:
        error = converter_error(_graph_with_errors())
        assert error is not None
        assert str(error) == "2 converter errors, first: convert alpha to dynamic: use of generic declaration"
        assert error.summary() == str(error)

    def test_report_lists_every_error_sorted(self) -> None:
        error = converter_error(_graph_with_errors())
        assert error is not None
        assert error.report() == (
            "convert alpha to dynamic: use of generic declaration\n"
            "convert zeta to dynamic: use of unexported name\n"
        )

    def test_sorting_uses_direction_first(self) -> None:
        def calc(request: Request, can_convert: CanConvert) -> Artifact:
            msg = f"cannot convert {request.key.description}"
            raise ConversionError(msg)

        graph = build_graph([Request.of("z"), Request.of("a", Direction.FROM_DYNAMIC)], calc)
        error = converter_error(graph)
        assert error is not None
        assert error.report().splitlines() == [
            "convert z to dynamic: cannot convert z",
            "convert a from dynamic: cannot convert a",
        ]

    def test_is_usable(self) -> None:
        error = converter_error(_graph_with_errors())
        assert error is not None
        assert error.is_usable(Key("C"))
        assert error.is_usable(Key("ok"))
        assert not error.is_usable(Key("A"))
        assert not error.is_usable(Key("zeta"))

    def test_causes(self) -> None:
        error = converter_error(_graph_with_errors())
        assert error is not None
        assert [cause.reason for cause in error.causes] == [
            "use of generic declaration",
            "use of unexported name",
        ]

    def test_can_be_raised(self) -> None:
        error = converter_error(_graph_with_errors())
        assert error is not None
        with pytest.raises(ConverterError, match="2 converter errors"):
            raise error

    def test_requires_errors(self) -> None:
        with pytest.raises(ValueError, match="at least one error"):
            ConverterError([], frozenset())
