#!/usr/bin/env python3
"""Export the organization chart built from the employee directory.

Run from the backend/ directory:

    python3 scripts/export_org_chart.py [--input FILE] [--output FILE] [--format json|text] [--verbose]

Without --input the configured directory backend is read (Cosmos DB when
DIRECTORY_BACKEND=cosmos). With --input, FILE is a JSON array of raw
employee documents in the directory's storage format.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from app.core.config import Settings  # noqa: E402
from app.models.employee import Employee  # noqa: E402
from app.services.employee_directory import EmployeeDirectory  # noqa: E402
from app.services.hierarchy import ChartNode, build_forest, employee_full_name  # noqa: E402
from app.services.org_chart_service import serialize_forest  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export the organization chart")
    parser.add_argument("--input", type=Path, default=None, help="JSON file with raw employee documents")
    parser.add_argument("--output", type=Path, default=None, help="Write to FILE instead of stdout")
    parser.add_argument("--format", choices=("json", "text"), default="json")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_employees_from_file(path: Path) -> list[Employee]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of employee documents")
    directory = EmployeeDirectory()
    return [directory._transform_employee(doc) for doc in raw]


async def load_employees_from_directory(settings: Settings) -> list[Employee]:
    directory = EmployeeDirectory()
    await directory.initialize(settings)
    try:
        return await directory.list_employees()
    finally:
        await directory.close()


def render_json(forest: list[ChartNode]) -> str:
    payload: list[dict[str, Any]] = [
        node.model_dump(by_alias=True) for node in serialize_forest(forest)
    ]
    return json.dumps({"employees": payload}, indent=2, ensure_ascii=False)


def render_text(forest: list[ChartNode]) -> str:
    lines: list[str] = []

    def _walk(node: ChartNode, depth: int) -> None:
        label = employee_full_name(node.employee) or node.id
        if node.employee.position:
            label = f"{label} ({node.employee.position})"
        lines.append(f"{'  ' * depth}- {label}")
        for child in node.children:
            _walk(child, depth + 1)

    for root in forest:
        _walk(root, 0)
    return "\n".join(lines)


async def export(args: argparse.Namespace) -> str:
    if args.input is not None:
        employees = load_employees_from_file(args.input)
        logger.info("Loaded %d employees from %s", len(employees), args.input)
    else:
        employees = await load_employees_from_directory(Settings())
        logger.info("Loaded %d employees from directory", len(employees))

    forest = build_forest(employees)
    logger.info("Built org chart with %d root(s)", len(forest))

    rendered = render_json(forest) if args.format == "json" else render_text(forest)
    if args.output is not None:
        args.output.write_text(rendered + "\n", encoding="utf-8")
        logger.info("Wrote %s", args.output)
    else:
        print(rendered)
    return rendered


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(export(args))


if __name__ == "__main__":
    main()
