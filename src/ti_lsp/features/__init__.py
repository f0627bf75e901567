"""Editor features, each a thin layer over the oracle client.

Handlers take their collaborators explicitly and return `lsprotocol` types.
Oracle failures surface as empty results, never as errors.
"""

from .code_action import APPLY_STUB_COMMAND, apply_stub, code_actions, parse_error_message
from .code_lens import code_lenses
from .completion import TRIGGER_CHARACTERS, completion_items
from .definition import definition
from .diagnostics import DiagnosticsPublisher, collect_diagnostics
from .hover import hover

__all__ = [
    "APPLY_STUB_COMMAND",
    "apply_stub",
    "code_actions",
    "parse_error_message",
    "code_lenses",
    "TRIGGER_CHARACTERS",
    "completion_items",
    "definition",
    "DiagnosticsPublisher",
    "collect_diagnostics",
    "hover",
]
