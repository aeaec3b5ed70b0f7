"""Rendering of ``codehost --help``."""
from __future__ import annotations

import textwrap
from typing import List

from codehost import __version__
from codehost.core.options.registry import Domain, OptionSpec, iter_options

_WIDTH = 80


def _option_label(spec: OptionSpec) -> str:
    shorts = [f"-{s}" for s in spec.short]
    label = " ".join([*shorts, f"--{spec.name}"])
    if spec.is_flag:
        return label
    if spec.domain is Domain.OPTIONAL:
        return f"{label} [value]"
    return f"{label} <value>"


def _option_description(spec: OptionSpec) -> str:
    text = spec.description
    if spec.choices:
        text = f"{text} [{', '.join(spec.choices)}]"
    markers = []
    if spec.beta:
        markers.append("(beta)")
    if spec.deprecated:
        markers.append("(deprecated)")
    if markers:
        text = f"{' '.join(markers)} {text}"
    return text


def render_help(program: str = "codehost") -> str:
    """Return the usage text listing every registered option."""
    specs = list(iter_options())
    labels = [_option_label(spec) for spec in specs]
    column = min(max(len(label) for label in labels) + 2, 36)
    indent = " " * (column + 2)

    lines: List[str] = [
        f"{program} {__version__}",
        "",
        f"Usage: {program} [options] [path]",
        f"    - Opening a directory: {program} ./path/to/your/project",
        f"    - Opening a saved workspace: {program} ./path/to/your/project.code-workspace",
        "",
        "Options",
    ]
    for spec, label in zip(specs, labels):
        description = _option_description(spec)
        wrapped = textwrap.wrap(description, width=_WIDTH - len(indent)) or [""]
        if len(label) > column:
            lines.append(f"  {label}")
            lines.extend(indent + part for part in wrapped)
            continue
        lines.append(f"  {label.ljust(column)}{wrapped[0]}")
        lines.extend(indent + part for part in wrapped[1:])
    return "\n".join(lines)


__all__ = ["render_help"]
