from __future__ import annotations

import re

from bundlescope.models.report import AnalysisResult

MAX_NODES = 50
_LABEL_WIDTH = 30
_SPECIAL_RE = re.compile(r"[<>{}|]")

_HEADER = """digraph BundleDependencies {
  rankdir=LR;
  node [shape=box, style=rounded, fontname="Arial"];
  edge [color=gray];
"""


def escape_label(text: str) -> str:
    """Make *text* safe inside a quoted DOT label, keeping its last 30 chars."""
    if not text:
        return "unknown"
    clipped = text[-_LABEL_WIDTH:]
    return _SPECIAL_RE.sub("_", clipped).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def to_dot(result: AnalysisResult) -> str:
    """Graphviz source for the largest modules, with edges guessed from reasons.

    A reason links to a node when either string contains the other, which is
    as loose as the reason text itself.
    """
    modules = result.bundle_stats.modules[:MAX_NODES]
    if not modules:
        return _HEADER + '\n  empty [label="No modules found"];\n}\n'

    names = [m.name for m in modules]
    nodes: list[str] = []
    edges: list[str] = []
    for index, module in enumerate(modules):
        label = escape_label(module.name)
        nodes.append(f'  m{index} [label="{label}\\n{module.size / 1024:.1f}KB", tooltip="{label}"];')
    for index, module in enumerate(modules):
        for reason in module.reasons:
            target = next((i for i, name in enumerate(names) if reason in name or name in reason), -1)
            if target >= 0 and target != index:
                edges.append(f"  m{index} -> m{target};")

    return _HEADER + "\n" + "\n".join(nodes) + "\n\n" + "\n".join(edges) + "\n}\n"
