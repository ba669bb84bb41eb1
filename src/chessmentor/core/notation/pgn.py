"""PGN-like transcript helpers for the SAN move stream."""

from __future__ import annotations

from collections.abc import Sequence

from chessmentor.core.enums import GameResult

_RESULT_TOKENS: dict[GameResult, str] = {
    GameResult.WHITE_WINS: "1-0",
    GameResult.BLACK_WINS: "0-1",
    GameResult.DRAW: "1/2-1/2",
    GameResult.IN_PROGRESS: "*",
}


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    return _RESULT_TOKENS[result]


def pgn_movetext_from_sans(
    sans: Sequence[str],
    result_token: str = "*",
    comments: Sequence[str | None] | None = None,
    *,
    first_fullmove: int = 1,
    black_first: bool = False,
) -> str:
    """Build numbered movetext, e.g. ``1. e4 e5 2. Nf3 *``."""
    if comments is not None and len(comments) != len(sans):
        raise ValueError("PGN comments length must match SAN move length")

    parts: list[str] = []
    offset = 1 if black_first else 0
    for idx, san in enumerate(sans):
        ply = idx + offset
        number = first_fullmove + ply // 2
        if ply % 2 == 0:
            parts.append(f"{number}.")
        elif idx == 0:
            parts.append(f"{number}...")
        parts.append(san)
        comment = comments[idx] if comments is not None else None
        if comment:
            # PGN comments cannot contain a closing brace.
            parts.append("{" + comment.replace("}", "]") + "}")
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(
    headers: dict[str, str],
    sans: Sequence[str],
    result_token: str,
    comments: Sequence[str | None] | None = None,
    *,
    first_fullmove: int = 1,
    black_first: bool = False,
) -> str:
    """Build a single-game PGN document."""
    lines = [
        '[{} "{}"]'.format(key, value.replace("\\", "\\\\").replace('"', '\\"'))
        for key, value in headers.items()
    ]
    lines.append("")
    lines.append(
        pgn_movetext_from_sans(
            sans,
            result_token,
            comments,
            first_fullmove=first_fullmove,
            black_first=black_first,
        )
    )
    lines.append("")
    return "\n".join(lines)
