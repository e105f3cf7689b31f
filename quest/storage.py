"""
Ledger persistence.

The save file holds one serialized goal per line followed by the score
on the final line. Saving overwrites the whole file.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Union

from quest.exceptions import FormatError
from quest.logger import get_logger, log_corruption
from quest.models import Goal
from quest.serialization import FIELD_DELIMITER, deserialize, serialize

logger = get_logger("storage")

PathLike = Union[str, Path]


@dataclass
class LoadResult:
    """Goals and score restored from a save file."""
    goals: List[Goal] = field(default_factory=list)
    score: int = 0
    skipped_lines: List[int] = field(default_factory=list)  # 1-based line numbers
    found: bool = True


def save_all(goals: Iterable[Goal], score: int, path: PathLike) -> None:
    """Write every goal and the score to `path`, replacing its contents."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    lines = [serialize(goal) for goal in goals]
    lines.append(str(int(score)))

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")

    logger.info(f"Saved {len(lines) - 1} goals (score {score}) to {path}")


def _parse_score(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise FormatError(f"Score is not a number: {raw.strip()!r}", raw_line=raw)


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(
            f"Line is not valid UTF-8 (bad byte at position {e.start})",
            raw_line=raw.decode("utf-8", errors="replace"),
        )


def load_all(path: PathLike) -> LoadResult:
    """
    Read a save file.

    A missing file gives an empty ledger. Lines that fail to decode or parse
    are logged and skipped; the rest of the file still loads.

    Raises:
        OSError: the path exists but cannot be read (a directory, no permission)
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No save file at {path}, starting with an empty ledger")
        return LoadResult(found=False)

    # Bytes, so one undecodable line cannot sink the whole file
    with open(path, "rb") as f:
        numbered = [
            (number, line.rstrip(b"\r\n"))
            for number, line in enumerate(f, start=1)
            if line.strip()
        ]

    result = LoadResult()
    if not numbered:
        return result

    def skip(number: int, raw: bytes, error: FormatError) -> None:
        error.line_number = number
        shown = error.raw_line if error.raw_line is not None else raw.decode("utf-8", errors="replace")
        log_corruption(number, shown, error.message, source=path)
        result.skipped_lines.append(number)

    # The score is the final line; a final line holding a goal record means it is missing
    last_number, last_raw = numbered[-1]
    if FIELD_DELIMITER.encode("utf-8") in last_raw:
        logger.warning(f"Save file {path} has no score line, using 0")
    else:
        numbered = numbered[:-1]
        try:
            result.score = _parse_score(_decode_line(last_raw))
        except FormatError as e:
            skip(last_number, last_raw, e)

    for number, raw in numbered:
        try:
            result.goals.append(deserialize(_decode_line(raw)))
        except FormatError as e:
            skip(number, raw, e)

    result.skipped_lines.sort()
    logger.info(
        f"Loaded {len(result.goals)} goals (score {result.score}) from {path}, "
        f"skipped {len(result.skipped_lines)} lines"
    )
    return result
