"""Organization chart construction from flat employee records.

Employees reference their supervisor only by display name. Every build
re-resolves those names against the chart-eligible employees (MANAGER or
ADMIN) and assembles a fresh forest; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from app.models.employee import CHART_ROLES, Employee

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ChartNode:
    employee: Employee
    children: list[ChartNode] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.employee.id


def full_name(first_name: str | None, last_name: str | None) -> str:
    return f"{(first_name or '').strip()} {(last_name or '').strip()}".strip()


def employee_full_name(employee: Employee) -> str:
    return full_name(employee.first_name, employee.last_name)


def is_eligible(employee: Employee) -> bool:
    return any(role in CHART_ROLES for role in employee.roles)


def eligible_employees(employees: Iterable[Employee]) -> list[Employee]:
    return [e for e in employees if is_eligible(e)]


def resolve_supervisor(eligible: Iterable[Employee], employee: Employee) -> Employee | None:
    """Return the first eligible employee whose full name equals the stored supervisor name.

    Duplicate full names are not disambiguated: enumeration order decides.
    """
    wanted = (employee.supervisor_name or "").strip()
    if not wanted:
        return None
    for candidate in eligible:
        if employee_full_name(candidate) == wanted:
            return candidate
    return None


def resolve_parent_ids(eligible: list[Employee]) -> dict[str, str | None]:
    """Map each eligible employee id to its resolved parent id (or None for a root).

    Equivalent to calling :func:`resolve_supervisor` for every employee, using
    a name index built once where the first occurrence of a name wins.
    Supervisor chains that loop back on themselves are cut so the result is
    always acyclic.
    """
    by_name: dict[str, str] = {}
    for candidate in eligible:
        by_name.setdefault(employee_full_name(candidate), candidate.id)

    parents: dict[str, str | None] = {}
    for employee in eligible:
        wanted = (employee.supervisor_name or "").strip()
        parent_id = by_name.get(wanted) if wanted else None
        if wanted and parent_id is None:
            logger.debug("Supervisor %r of employee %s does not resolve", wanted, employee.id)
        parents[employee.id] = parent_id

    _break_cycles(eligible, parents)
    return parents


def _break_cycles(eligible: list[Employee], parents: dict[str, str | None]) -> None:
    # 0 = unvisited, 1 = on the current chain, 2 = known to reach a root
    order = {e.id: position for position, e in enumerate(eligible)}
    state = dict.fromkeys(parents, 0)

    for employee in eligible:
        chain: list[str] = []
        current = employee.id
        while current is not None and state[current] == 0:
            state[current] = 1
            chain.append(current)
            current = parents[current]

        if current is not None and state[current] == 1:
            loop = chain[chain.index(current):]
            cut = min(loop, key=order.__getitem__)
            logger.warning("Supervisor cycle through %d employees, treating %s as a root", len(loop), cut)
            parents[cut] = None

        for member in chain:
            state[member] = 2


def assemble_forest(eligible: list[Employee], parents: dict[str, str | None]) -> list[ChartNode]:
    index = {employee.id: ChartNode(employee) for employee in eligible}
    roots: list[ChartNode] = []

    for employee in eligible:
        node = index[employee.id]
        parent_id = parents.get(employee.id)
        if parent_id is not None and parent_id in index:
            index[parent_id].children.append(node)
        else:
            roots.append(node)

    return roots


def build_forest(employees: Iterable[Employee]) -> list[ChartNode]:
    eligible = eligible_employees(employees)
    return assemble_forest(eligible, resolve_parent_ids(eligible))


def iter_nodes(forest: Iterable[ChartNode]) -> Iterator[ChartNode]:
    """Depth-first, pre-order walk over every node of ``forest``."""
    stack = list(reversed(list(forest)))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_node(forest: Iterable[ChartNode], employee_id: str) -> ChartNode | None:
    for node in iter_nodes(forest):
        if node.id == employee_id:
            return node
    return None


def is_descendant(node: ChartNode, target_id: str) -> bool:
    """True if ``target_id`` appears anywhere below ``node`` (``node`` itself excluded)."""
    for descendant in iter_nodes(node.children):
        if descendant.id == target_id:
            return True
    return False


def parent_map(forest: Iterable[ChartNode]) -> dict[str, str | None]:
    parents: dict[str, str | None] = {}
    for root in forest:
        parents[root.id] = None
        for node in iter_nodes([root]):
            for child in node.children:
                parents[child.id] = node.id
    return parents


def supervisor_choices(employees: Iterable[Employee], employee_id: str | None = None) -> list[Employee]:
    """Eligible employees that may be offered as the supervisor of ``employee_id``.

    The employee itself and everything currently below it in the chart are
    left out. With no ``employee_id`` every eligible employee is offered.
    This only narrows what is presented; writes are not re-validated.
    """
    employees = list(employees)
    eligible = eligible_employees(employees)
    if employee_id is None:
        return eligible

    node = find_node(build_forest(employees), employee_id)
    return [
        candidate
        for candidate in eligible
        if candidate.id != employee_id and (node is None or not is_descendant(node, candidate.id))
    ]
