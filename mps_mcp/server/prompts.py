"""Agent-facing workflow text for scaffolding a front-end module."""

from __future__ import annotations

WORKFLOW_TOOLS = (
    "getSystemList",
    "getSystemPermissionTree",
    "listSystemFormTemplate",
    "exportFrontendCodeTemplate",
    "getSystemProjectRouterTree",
    "createSystemProjectRouter",
    "getSystemProjectMenuTree",
    "createSystemProjectMenu",
)


def module_development_steps(sys_id: int | str, project_id: str, module_name: str) -> str:
    """Step-by-step instructions for building *module_name* with the platform tools."""
    steps = [
        "Fetch the MPS platform system list.",
        f"Fetch the permission tree of system sys_id = {sys_id}.",
        (
            f"List the form templates of that system, find the form template for "
            f"the {module_name} module and note its PK for code generation."
        ),
        (
            f"Use the camelCase pinyin spelling of {module_name} as the module name and "
            f"create the module directory under src/pages (src/pages/<pinyin name>)."
        ),
        (
            "Export the front-end code with exportFrontendCodeTemplate using the PK from "
            "step 3, writing into that directory (absolute path)."
        ),
        "Register the exported Index.vue in src/pageReg.js.",
        f"Fetch the route tree of project project_id = {project_id}.",
        (
            "Pick a suitable route node PK as parent (for example the route whose path is "
            f'"/") and create the route for the {module_name} module.'
        ),
        f"Fetch the menu tree of project project_id = {project_id}.",
        (
            "Pick a suitable menu node as parent (may be empty) and create the menu for "
            f"the {module_name} module."
        ),
        "Tune the column widths in Table.vue based on what each header means.",
        "Improve the Form.vue layout, grouping fields by relevance and importance.",
        "Done.",
    ]
    lines = [f"Complete the development of the {module_name} module with these steps:"]
    lines.extend(f"{i}. {step}" for i, step in enumerate(steps, start=1))
    lines.append("")
    lines.append("Tools to use:")
    lines.extend(f"- {name}" for name in WORKFLOW_TOOLS)
    return "\n".join(lines)
