import os
from pathlib import Path

from qiyao.domain.errors import GameFormatError, SaveFailedError


def export_document(path: str | Path, document: str) -> Path:
    """Write ``document`` next to ``path`` then swap it in, so a crash never leaves half a save."""

    target = Path(path)
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        if target.parent and not target.parent.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(document, encoding="utf-8")
        os.replace(tmp_path, target)
    except OSError as exc:
        if tmp_path.exists():
            tmp_path.unlink()
        raise SaveFailedError(f"Could not write save file {target}: {exc}") from exc
    return target


def import_document(path: str | Path) -> str:
    source = Path(path)
    try:
        return source.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise GameFormatError(f"Could not read save file {source}: {exc}") from exc
