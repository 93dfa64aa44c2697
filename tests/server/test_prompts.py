"""Tests for the module development workflow text."""

from __future__ import annotations

import re

from mps_mcp.server.prompts import WORKFLOW_TOOLS, module_development_steps


def test_steps_are_numbered_in_order() -> None:
    text = module_development_steps(3, "proj-1", "Orders")
    numbers = [int(m) for m in re.findall(r"^(\d+)\. ", text, flags=re.MULTILINE)]
    assert numbers == list(range(1, 14))


def test_arguments_are_interpolated() -> None:
    text = module_development_steps("7", "proj-9", "Invoices")
    assert text.startswith("Complete the development of the Invoices module")
    assert "sys_id = 7" in text
    assert text.count("project_id = proj-9") == 2


def test_tool_list_appended() -> None:
    text = module_development_steps(1, "p", "m")
    tail = text.split("Tools to use:\n", 1)[1]
    assert tail.splitlines() == [f"- {name}" for name in WORKFLOW_TOOLS]
