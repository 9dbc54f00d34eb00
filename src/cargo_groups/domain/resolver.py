"""Group resolution — match workspace packages, then reduce to top level.

Step 1 (match): every workspace package whose name matches the
identifier globs, or whose path matches the path globs, is selected.

Step 2 (top-level reduction, optional): a selected package that is a
direct dependency of another selected package is dropped.  Building the
dependent already builds it, and naming both explicitly lets cargo pick
two different versions or feature sets of the same crate in one build.

Coverage uses single-hop edges between *selected* packages only:

    A -> B -> C, all selected      => {A}
    A -> B -> C, only A, C selected => {A, C}

A package removed by reduction still covers its own dependencies,
because dependency edges are fixed workspace facts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

import networkx as nx

from cargo_groups.domain.errors import GroupNotFoundError
from cargo_groups.domain.packages import Package
from cargo_groups.domain.patterns import CompiledMatcher, classify

logger = logging.getLogger(__name__)


def match_packages(matcher: CompiledMatcher, packages: Iterable[Package]) -> list[Package]:
    """Return the packages selected by *matcher*, unique by identifier."""
    selected: dict[str, Package] = {}
    for package in packages:
        if package.identifier in selected:
            continue
        if matcher.matches(package):
            selected[package.identifier] = package
    return list(selected.values())


def coverage_graph(packages: Sequence[Package]) -> nx.DiGraph:
    """Build the coverer -> covered graph induced on *packages*.

    Dependencies that are not themselves in *packages* contribute no edge.
    """
    g: nx.DiGraph = nx.DiGraph()
    for package in packages:
        g.add_node(package.identifier, package=package)
    for package in packages:
        for dependency in package.dependencies:
            if dependency in g:
                g.add_edge(package.identifier, dependency)
    return g


def reduce_to_top_level(packages: Sequence[Package]) -> list[Package]:
    """Drop every package that another package in *packages* depends on."""
    g = coverage_graph(packages)
    survivors = [package for package in packages if g.in_degree(package.identifier) == 0]
    if len(survivors) != len(packages):
        logger.debug(
            "Reduced %d packages to %d top-level packages",
            len(packages),
            len(survivors),
        )
    return survivors


def resolve(
    matcher: CompiledMatcher,
    packages: Iterable[Package],
    *,
    top_level: bool = False,
) -> list[Package]:
    """Select the packages a group means.

    The result order is unspecified; sort it when order matters.
    Zero matches is a valid (empty) result.
    """
    matched = match_packages(matcher, packages)
    if top_level:
        return reduce_to_top_level(matched)
    return matched


def resolve_group(
    groups: Mapping[str, Sequence[str]],
    group: str,
    packages: Iterable[Package],
    *,
    top_level: bool = False,
) -> list[Package]:
    """Look up *group* and resolve it against *packages*.

    Raises:
        GroupNotFoundError: If *group* is not defined.
        PatternError: If any of the group's patterns is malformed.
    """
    patterns = groups.get(group)
    if patterns is None:
        raise GroupNotFoundError(group, list(groups))
    matcher = classify(patterns)
    return resolve(matcher, packages, top_level=top_level)
