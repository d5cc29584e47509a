"""Memoized, failure-tolerant construction of the conversion graph."""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import replace
from typing import TYPE_CHECKING

from ._node import ConversionError, ConversionGraph, InvariantViolationError, Node

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bindgraph._key import Key, Request

    from ._node import CalcNode

logger = logging.getLogger(__name__)


def build_graph(seeds: Iterable[Request], calc_node: CalcNode) -> ConversionGraph:  # noqa: C901
    """Build the complete, pruned dependency graph of conversion artifacts.

    The build works in waves, starting with ``seeds``:

    1. Each request of the current wave whose key has no node yet is passed
       to ``calc_node``. Requests for known keys only merge debug labels.
    2. If the calculation fails, an error node is stored and it, together
       with everything that depends on it, is marked incomplete before the
       wave continues.
    3. If it succeeds, self-references are dropped from its dependencies.
       A node depending on an already incomplete node is marked incomplete
       (with its dependents). Otherwise its dependencies form the next wave.

    When no wave is left, a second pass walks forward from the seeds through
    nodes that are not incomplete. Only the nodes it reaches are valid.

    ``calc_node`` receives a ``can_convert`` probe that answers whether an
    artifact would be generated successfully. The probe runs the same
    traversal for the requested artifact and reuses every node already
    calculated. Keys whose calculation or probe is still running further up
    the call stack are assumed convertible, so probing cyclic structures
    terminates and no key is ever calculated twice.

    Args:
        seeds: The initially requested artifacts.
        calc_node: Calculates a single artifact. Must return the same result
            for the same key throughout the build. Raises ConversionError if
            the artifact cannot be generated.

    Returns:
        The resulting ConversionGraph.

    Raises:
        InvariantViolationError: If the traversal and the incompleteness
            propagation disagree about the shape of the graph.

    Example:
        >>> def calc(request, can_convert):
        ...     if request.key.description == "A":
        ...         return Artifact(deps=(Request.of("A"), Request.of("int")))
        ...     return Artifact()
        >>> graph = build_graph([Request.of("A")], calc)
        >>> [node.key.description for node in graph.sorted_nodes()]
        ['A', 'int']

    """
    seeds = tuple(seeds)

    # Every calculated node, including error and incomplete nodes
    nodes: dict[Key, Node] = {}
    # Key -> keys of the nodes depending on it
    inverse_deps: defaultdict[Key, list[Key]] = defaultdict(list)
    # Error origins
    errors: dict[Key, ConversionError] = {}
    # Keys whose calculation is running further up the call stack
    calculating: set[Key] = set()
    # Keys being probed by can_convert further up the call stack
    probing: set[Key] = set()
    # Labels of requests made while the key was still being calculated
    pending_labels: defaultdict[Key, list[str]] = defaultdict(list)

    def propagate_incompleteness(origin: Key) -> None:
        """Mark ``origin`` and every node transitively depending on it as incomplete."""
        logger.debug("Propagating incompleteness from %s", origin)
        queue = deque([origin])
        while queue:
            key = queue.popleft()
            node = nodes.get(key)
            if node is None:
                msg = f"Node {key} is recorded as a dependent but was never calculated"
                raise InvariantViolationError(msg)
            if node.incomplete:
                continue
            nodes[key] = replace(node, incomplete=True)
            queue.extend(inverse_deps.get(key, ()))

    def calculate(request: Request) -> list[Request]:
        """Calculate and store the node for ``request``, returning the requests to traverse next."""
        key = request.key
        logger.debug("Calculating %s", key)

        calculating.add(key)
        try:
            artifact = calc_node(request, can_convert)
        except ConversionError as e:
            logger.debug("Failed to calculate %s: %s", key, e)
            nodes[key] = Node(
                key=key,
                error=e,
                debug_labels=request.debug_labels + tuple(pending_labels.pop(key, ())),
            )
            errors[key] = e
            propagate_incompleteness(key)
            return []
        finally:
            calculating.discard(key)

        deps = tuple(dep for dep in artifact.deps if dep.key != key)
        nodes[key] = Node(
            key=key,
            code=artifact.code,
            deps=deps,
            resources=tuple(artifact.resources),
            debug_labels=request.debug_labels + tuple(pending_labels.pop(key, ())),
        )

        if any(dep.key in nodes and nodes[dep.key].incomplete for dep in deps):
            propagate_incompleteness(key)
            return []

        for dep in deps:
            inverse_deps[dep.key].append(key)
        return list(deps)

    def traverse(start: Iterable[Request]) -> None:
        wave = list(start)
        while wave:
            next_wave: list[Request] = []
            for request in wave:
                key = request.key
                node = nodes.get(key)
                if node is not None:
                    if request.debug_labels:
                        nodes[key] = replace(node, debug_labels=node.debug_labels + request.debug_labels)
                    continue
                if key in calculating:
                    # Stored once the calculation up the stack returns
                    pending_labels[key].extend(request.debug_labels)
                    continue
                next_wave.extend(calculate(request))
            wave = next_wave

    def can_convert(request: Request) -> bool:
        key = request.key
        if key in probing or key in calculating:
            return True

        probing.add(key)
        try:
            traverse([request])
        finally:
            probing.discard(key)

        node = nodes.get(key)
        if node is None:
            msg = f"Expected explicitly traversed node {key} to exist"
            raise InvariantViolationError(msg)
        return not node.incomplete

    traverse(seeds)

    # Keep only nodes reachable from the seeds through complete nodes
    valid: dict[Key, Node] = {}
    wave = list(seeds)
    while wave:
        next_wave: list[Request] = []
        for request in wave:
            node = nodes.get(request.key)
            if node is None:
                msg = f"Expected node {request.key} with complete dependents to have been calculated"
                raise InvariantViolationError(msg)
            if node.incomplete or request.key in valid:
                continue
            valid[request.key] = node
            next_wave.extend(node.deps)
        wave = next_wave

    logger.debug(
        "Built conversion graph: %d valid, %d calculated, %d errors",
        len(valid),
        len(nodes),
        len(errors),
    )

    return ConversionGraph(
        nodes=dict(sorted(valid.items())),
        errors=dict(sorted(errors.items())),
        debug_nodes=dict(sorted(nodes.items())),
        seeds=seeds,
    )
