"""Quick fixes that add missing classes and methods to the builtin config.

The oracle only reports errors as prose, so `parse_error_message` matches
its exact wording. A change in that wording silently disables these fixes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Sequence, Union

from lsprotocol.types import CodeAction, CodeActionKind, Command, Diagnostic
from pydantic import BaseModel, Field, ValidationError

from ..builtin_config import BuiltinConfigRepository, class_stub, method_stub
from ..oracle import ClassNode, OracleClient
from ..resolver import InheritanceGraph

logger = logging.getLogger(__name__)

APPLY_STUB_COMMAND = "ti-lsp.applyStub"

CLASS_NOT_DEFINED = re.compile(r"class '([^']+)' is not defined")
INSTANCE_METHOD_NOT_DEFINED = re.compile(r"instance method '([^']+)' is not defined for (\S+)")
CLASS_METHOD_NOT_DEFINED = re.compile(r"class method '([^']+)' is not defined for (\S+)")


@dataclass(frozen=True)
class MissingClass:
    class_name: str


@dataclass(frozen=True)
class MissingMethod:
    class_name: str
    method_name: str
    scope: Literal["instance", "class"]


MissingSymbol = Union[MissingClass, MissingMethod]


def parse_error_message(message: str) -> Optional[MissingSymbol]:
    """Translate an oracle error message into a structured error kind."""
    if match := CLASS_NOT_DEFINED.search(message):
        return MissingClass(class_name=match.group(1))

    if match := INSTANCE_METHOD_NOT_DEFINED.search(message):
        return MissingMethod(class_name=match.group(2), method_name=match.group(1), scope="instance")

    if match := CLASS_METHOD_NOT_DEFINED.search(message):
        return MissingMethod(class_name=match.group(2), method_name=match.group(1), scope="class")

    return None


class StubRequest(BaseModel):
    """Arguments of the apply-stub command."""

    kind: Literal["class", "method"]
    class_name: str = Field(description="Class the file is written for")
    method_name: Optional[str] = Field(default=None)
    scope: Literal["instance", "class"] = Field(default="instance")


def _command_action(title: str, request: StubRequest, diagnostic: Diagnostic) -> CodeAction:
    return CodeAction(
        title=title,
        kind=CodeActionKind.QuickFix,
        diagnostics=[diagnostic],
        command=Command(
            title=title,
            command=APPLY_STUB_COMMAND,
            arguments=[request.model_dump()],
        ),
    )


def ancestor_classes(oracle: OracleClient, text: str, class_name: str) -> list[str]:
    """Class names above `class_name` as reported by `--extends`, nearest first."""
    edges = oracle.extends(text, class_name)
    graph = InheritanceGraph(edges)

    starts: list[ClassNode] = []
    for edge in edges:
        if edge.child.klass == class_name and edge.child not in starts:
            starts.append(edge.child)

    names: list[str] = []
    for start in starts:
        for node in graph.ancestors(start):
            if node.klass != class_name and node.klass not in names:
                names.append(node.klass)
    return names


def class_actions(
    missing: MissingClass,
    diagnostic: Diagnostic,
    builtins: BuiltinConfigRepository,
) -> list[CodeAction]:
    if builtins.find(missing.class_name) is not None:
        return []
    title = f"Create class definition for '{missing.class_name}'"
    request = StubRequest(kind="class", class_name=missing.class_name)
    return [_command_action(title, request, diagnostic)]


def method_actions(
    missing: MissingMethod,
    diagnostic: Diagnostic,
    builtins: BuiltinConfigRepository,
    ancestors: Sequence[str],
) -> list[CodeAction]:
    """One fix for the class itself plus one per ancestor with a config file."""
    actions = []

    for target in [missing.class_name, *ancestors]:
        if builtins.find(target) is None:
            continue

        title = f"Add method '{missing.method_name}' to class '{target}'"
        if target != missing.class_name:
            title += f" (ancestor of '{missing.class_name}')"

        request = StubRequest(
            kind="method",
            class_name=target,
            method_name=missing.method_name,
            scope=missing.scope,
        )
        actions.append(_command_action(title, request, diagnostic))

    return actions


def code_actions(
    oracle: OracleClient,
    builtins: BuiltinConfigRepository | None,
    text: str,
    diagnostics: Sequence[Diagnostic],
) -> list[CodeAction]:
    if builtins is None:
        return []

    actions: list[CodeAction] = []
    ancestors_by_class: dict[str, list[str]] = {}

    for diagnostic in diagnostics:
        missing = parse_error_message(diagnostic.message)
        if missing is None:
            continue

        if isinstance(missing, MissingClass):
            actions.extend(class_actions(missing, diagnostic, builtins))
            continue

        if missing.class_name not in ancestors_by_class:
            ancestors_by_class[missing.class_name] = ancestor_classes(
                oracle, text, missing.class_name
            )
        actions.extend(
            method_actions(missing, diagnostic, builtins, ancestors_by_class[missing.class_name])
        )

    return actions


def apply_stub(payload: object, builtins: BuiltinConfigRepository) -> Optional[Path]:
    """Write the stub described by a code action's command arguments.

    Returns the written file, or None when nothing could be written.
    Applying the same method stub twice adds it twice.
    """
    try:
        request = StubRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning("Invalid stub request %r: %s", payload, e)
        return None

    try:
        if request.kind == "class":
            return builtins.save(class_stub(request.class_name))

        if not request.method_name or builtins.find(request.class_name) is None:
            return None

        config = builtins.load(request.class_name)
        stub = method_stub(request.method_name)
        if request.scope == "class":
            config.class_methods.append(stub)
        else:
            config.instance_methods.append(stub)
        return builtins.save(config)

    except (OSError, ValidationError) as e:
        logger.warning("Could not update builtin config for %s: %s", request.class_name, e)
        return None
