"""
Page pass: expand every {% picture %} tag in a site's pages and write the
rendered pages under the site destination.

Pages render in parallel. They share the generated-image directory, which is
safe because generated files are content-named and published atomically.
"""

import concurrent.futures as cf
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .config import SiteSettings
from .errors import PictureTagError
from .presets import expand
from .tag import TAG_RE, parse_directive, render_directive

log = logging.getLogger(__name__)

PAGE_EXTS = {".html", ".htm", ".md", ".markdown"}

# Transient and editor artefacts to ignore
TRANSIENT_SUFFIXES = {".swp", ".tmp", ".bak"}


def is_transient(p: Path) -> bool:
    n = p.name
    return (
        n.startswith(".#")         # Emacs lockfiles
        or n.endswith("~")         # backup files
        or n == ".DS_Store"
        or p.suffix.lower() in TRANSIENT_SUFFIXES
    )


def _inside(p: Path, parent: Path) -> bool:
    try:
        p.resolve().relative_to(parent.resolve())
        return True
    except ValueError:
        return False


def collect_pages(site: SiteSettings) -> List[Path]:
    pages = []
    for p in sorted(site.source.rglob("*")):
        if not p.is_file() or p.suffix.lower() not in PAGE_EXTS or is_transient(p):
            continue
        if _inside(p, site.destination):
            continue
        pages.append(p)
    return pages


def write_text_atomic(target: Path, text: str) -> None:
    tmp = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    with open(tmp, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    os.replace(tmp, target)


def read_page(p: Path) -> str:
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return p.read_text(encoding="latin-1")


# ---------- Per page ----------

def _check_only(params: str, site: SiteSettings) -> int:
    """Validate one tag without touching any image; returns its variant count."""
    directive = parse_directive(params)
    preset = site.picture.preset(directive.preset_name)
    return len(expand(preset, directive.image_src, directive.source_overrides))


def process_page(page: Path, site: SiteSettings, dry_run: bool = False) -> Tuple[str, bool]:
    """Returns (status line, ok)."""
    rel = page.relative_to(site.source)
    try:
        text = read_page(page)
    except FileNotFoundError:
        return f"SKIP {rel}  vanished during scan", True
    except OSError as e:
        return f"SKIP {rel}  read error: {e}", True

    tags = list(TAG_RE.finditer(text))
    if not tags:
        return f"SKIP {rel}  no picture tags", True

    try:
        if dry_run:
            count = sum(_check_only(m.group("params"), site) for m in tags)
            return f"DRY  {rel}  pictures: {len(tags)}, variants: {count}", True
        rendered = TAG_RE.sub(lambda m: render_directive(m.group("params"), site), text)
    except (PictureTagError, OSError) as e:
        log.error("%s: %s", rel, e)
        return f"ERR  {rel}: {e}", False

    out = site.destination / rel
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        write_text_atomic(out, rendered)
    except OSError as e:
        log.error("%s: %s", rel, e)
        return f"ERR  {rel}: {e}", False
    return f"EDIT {rel}  pictures: {len(tags)}", True


# ---------- Whole site ----------

@dataclass
class PassReport:
    statuses: List[str] = field(default_factory=list)
    failed: int = 0
    keep_files: Tuple[str, ...] = ()


def process_pages(
    site: SiteSettings,
    pages: Optional[List[Path]] = None,
    dry_run: bool = False,
    threads: int = 4,
) -> PassReport:
    if pages is None:
        pages = collect_pages(site)

    report = PassReport(keep_files=site.with_kept_output().keep_files)
    with cf.ThreadPoolExecutor(max_workers=max(1, threads)) as ex:
        futures = [ex.submit(process_page, p, site, dry_run) for p in pages]
        for fut in cf.as_completed(futures):
            status, ok = fut.result()
            log.info(status)
            report.statuses.append(status)
            if not ok:
                report.failed += 1
    return report
