"""Source scanners used by the audit steps."""

from dataclasses import dataclass
from pathlib import Path

from core.infrastructure.logging import get_logger

logger = get_logger("orchestration.scanners")

COMPONENT_SUFFIXES = (".tsx", ".jsx")

DISABLED_MARKERS = ("disabled={true}", "disabled=true")
READONLY_MARKERS = ("readOnly={true}", "readOnly=true")

LOG_ERROR_MARKERS = ("error", "failed")


@dataclass(frozen=True)
class FormFinding:
    """A component file that hard-codes a blocked form input."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class GrepMatch:
    """One ``path:line:content`` line of ``grep -n`` output."""

    path: str
    line_number: int | None
    content: str


def scan_form_inputs(root: Path) -> list[FormFinding]:
    """
    Walk ``root`` for React components with explicitly blocked inputs.

    A missing directory yields no findings. Files that cannot be read are
    logged and skipped.
    """
    findings: list[FormFinding] = []
    if not root.is_dir():
        logger.info(f"Form scan skipped, no directory at {root}")
        return findings

    for path in sorted(root.rglob("*")):
        if path.suffix not in COMPONENT_SUFFIXES or not path.is_file():
            continue
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning(f"Cannot read {path}: {exc}")
            continue

        if any(marker in content for marker in DISABLED_MARKERS):
            findings.append(FormFinding(str(path), "Form input explicitly disabled"))
        if any(marker in content for marker in READONLY_MARKERS):
            findings.append(FormFinding(str(path), "Form input set to read-only"))

    return findings


def parse_grep_matches(output: str) -> list[GrepMatch]:
    """Parse ``grep -r -n`` output; lines without a ``path:`` prefix are ignored."""
    matches: list[GrepMatch] = []
    for line in output.splitlines():
        if ":" not in line:
            continue
        path, rest = line.split(":", 1)
        line_number: int | None = None
        number, sep, content = rest.partition(":")
        if sep and number.isdigit():
            line_number = int(number)
        else:
            content = rest
        matches.append(GrepMatch(path=path, line_number=line_number, content=content.strip()))
    return matches


def scan_log_errors(log_dirs: list[Path]) -> list[str]:
    """
    Collect lines mentioning ``error`` or ``failed`` (any case) from ``*.log``
    files directly inside each directory. Missing directories are skipped.
    """
    errors: list[str] = []
    for log_dir in log_dirs:
        if not log_dir.is_dir():
            continue
        for log_file in sorted(log_dir.glob("*.log")):
            try:
                lines = log_file.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as exc:
                logger.warning(f"Cannot read {log_file}: {exc}")
                continue
            errors.extend(
                line for line in lines
                if any(marker in line.lower() for marker in LOG_ERROR_MARKERS)
            )
    return errors
