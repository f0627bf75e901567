"""Code lenses showing the inferred signature above each method."""

from lsprotocol.types import CodeLens, Command, Position, Range

from ..oracle import OracleClient, SignatureLens

SHOW_SIGNATURE_COMMAND = "ruby-ti.showSignature"


def to_lens(record: SignatureLens) -> CodeLens:
    start = Position(line=record.row, character=0)
    return CodeLens(
        range=Range(start=start, end=start),
        command=Command(title=record.signature, command=SHOW_SIGNATURE_COMMAND),
    )


def code_lenses(oracle: OracleClient, text: str) -> list[CodeLens]:
    return [to_lens(record) for record in oracle.signatures(text)]
