"""
Solidity source renderer for ContractModel.

Pure serialization: the same model always yields byte-identical text.

Layout:
    - SPDX license and compatibility header, pragma
    - imports grouped by path, sorted
    - contract declaration with the linearized parent list
    - using-directives and state variables
    - constructor
    - getHookPermissions, lifecycle hooks, component functions, joint overrides
"""

from typing import Dict, List, Sequence, Tuple

from hookgen.model import Constructor, ContractModel, Function, FunctionKind
from hookgen.registry import ImportRef

PRAGMA = "^0.8.26"
INDENT = "    "
MAX_LINE_LENGTH = 100


def _group_imports(imports: Sequence[ImportRef]) -> List[Tuple[str, List[str]]]:
    """Collapse imports into one entry per path, symbols sorted."""
    by_path: Dict[str, set] = {}
    for ref in imports:
        by_path.setdefault(ref.path, set()).add(ref.symbol)
    return [(path, sorted(symbols)) for path, symbols in sorted(by_path.items())]


def _import_lines(path: str, symbols: Sequence[str]) -> List[str]:
    line = f'import {{{", ".join(symbols)}}} from "{path}";'
    if len(line) <= MAX_LINE_LENGTH or len(symbols) == 1:
        return [line]
    return ["import {"] + [f"{INDENT}{s}," for s in symbols[:-1]] + [INDENT + symbols[-1], f'}} from "{path}";']


def _signature_lines(opening: str, params: Sequence[str]) -> List[str]:
    """`opening(params)`, one parameter per line when it does not fit."""
    signature = f"{opening}({', '.join(params)})"
    if not params or len(INDENT + signature) <= MAX_LINE_LENGTH:
        return [INDENT + signature]
    lines = [f"{INDENT}{opening}("]
    lines.extend(f"{INDENT * 2}{p}," for p in params[:-1])
    lines.append(f"{INDENT * 2}{params[-1]}")
    lines.append(INDENT + ")")
    return lines


def _block(opening: str, params: Sequence[str], attributes: Sequence[str], body: Sequence[str]) -> List[str]:
    """
    Render `opening(params) attributes { body }` at one level of indentation.

    Short headers stay on one line. Long ones put each attribute on its own
    line with the opening brace on a line by itself, and split the parameter
    list one per line if the signature alone is still too long.
    """
    header = f"{opening}({', '.join(params)})"
    inline = " ".join([header, *attributes])
    if len(INDENT + inline) + 2 <= MAX_LINE_LENGTH:
        if not body:
            return [f"{INDENT}{inline} {{}}"]
        lines = [f"{INDENT}{inline} {{"]
    else:
        lines = _signature_lines(opening, params) + [INDENT * 2 + a for a in attributes]
        if not body:
            return lines + [INDENT + "{}"]
        lines.append(INDENT + "{")
    lines.extend(INDENT * 2 + statement for statement in body)
    lines.append(INDENT + "}")
    return lines


def _function_lines(function: Function) -> List[str]:
    attributes = [function.visibility]
    if function.mutability:
        attributes.append(function.mutability)
    if function.overrides is not None:
        if function.overrides:
            attributes.append(f"override({', '.join(function.overrides)})")
        else:
            attributes.append("override")
    attributes.extend(function.modifiers)
    if function.returns:
        attributes.append(f"returns ({', '.join(function.returns)})")
    return _block(f"function {function.name}", function.params, attributes, function.body)


def _constructor_lines(constructor: Constructor) -> List[str]:
    params = [p.render() for p in constructor.params]
    return _block("constructor", params, constructor.initializers, constructor.body)


def generate_solidity(model: ContractModel) -> str:
    """
    Generate Solidity source for a contract model.

    Args:
        model: ContractModel produced by the generation pipeline

    Returns:
        String containing the complete contract source, newline-terminated
    """
    lines = []

    # Header
    lines.append(f"// SPDX-License-Identifier: {model.license}")
    if model.registry_version:
        lines.append(f"// Compatible with OpenZeppelin Uniswap Hooks ^{model.registry_version}")
    lines.append(f"pragma solidity {PRAGMA};")
    lines.append("")

    # =========================================================================
    # IMPORTS
    # =========================================================================

    for path, symbols in _group_imports(model.imports):
        lines.extend(_import_lines(path, symbols))
    if model.imports:
        lines.append("")

    # =========================================================================
    # DECLARATION
    # =========================================================================

    if model.security_contact:
        lines.append(f"/// @custom:security-contact {model.security_contact}")
    declaration = f"contract {model.name}"
    if model.parents:
        declaration += f" is {', '.join(model.parents)}"
    lines.append(declaration + " {")

    sections: List[List[str]] = []
    if model.state:
        sections.append([INDENT + s for s in model.state])
    sections.append(_constructor_lines(model.constructor))

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    shared_seen = False
    for function in model.functions:
        function_lines = _function_lines(function)
        if function.kind is FunctionKind.SHARED and not shared_seen:
            shared_seen = True
            function_lines = [INDENT + "// The following functions are overrides required by Solidity.", ""] + function_lines
        sections.append(function_lines)

    for index, section in enumerate(sections):
        if index:
            lines.append("")
        lines.extend(section)

    # Footer
    lines.append("}")
    lines.append("")

    return "\n".join(lines)


def save_solidity_file(model: ContractModel, filename: str) -> None:
    """
    Generate Solidity and save to file.

    Args:
        model: ContractModel to render
        filename: Output file path (.sol extension recommended)
    """
    source = generate_solidity(model)
    with open(filename, "w") as f:
        f.write(source)


__all__ = ["generate_solidity", "save_solidity_file", "PRAGMA"]
