# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from pathlib import Path
from typing import List, Optional

import typer

from ..domain.errors import ConfigurationError, FilesystemError, FspecsError
from ..domain.options import ConflictStrategy, WalkOptions
from ..logging_config import setup_logging
from ..services import walk as walk_service
from ..services.safe_copy import backup as backup_file
from ..services.safe_copy import safe_copy
from ..specs.file import FileSpec
from ..specs.folder import FolderSpec

setup_logging()

app = typer.Typer(help="fspecs CLI - typed paths, filtered walks, type detection and safe copies")

logger = logging.getLogger(__name__)

BACKUP_STRATEGIES = {ConflictStrategy.RENAME_WITH_TILDE, ConflictStrategy.RENAME_WITH_NUMBER}


def _enable_verbose(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")


def _parse_strategy(value: str, allowed: Optional[set] = None) -> ConflictStrategy:
    """
    Parse a strategy name into a ConflictStrategy.
    Raises Typer BadParameter for names outside ``allowed``.
    """
    choices = allowed if allowed is not None else set(ConflictStrategy)
    try:
        strategy = ConflictStrategy(value.strip().lower())
    except ValueError:
        strategy = None
    if strategy not in choices:
        raise typer.BadParameter(
            f"Unknown strategy: {value}. "
            f"Valid options: {', '.join(sorted(s.value for s in choices))}"
        )
    return strategy


def _fail(err: FspecsError) -> None:
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(code=1)


@app.command()
def walk(
    path: Path = typer.Argument(..., help="Folder to walk"),
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth", help="Deepest level to list; the root is level 0."
    ),
    no_files: bool = typer.Option(False, "--no-files", help="Leave files out."),
    no_dirs: bool = typer.Option(False, "--no-dirs", help="Leave folders out."),
    no_symlinks: bool = typer.Option(False, "--no-symlinks", help="Leave symlinks out."),
    follow: bool = typer.Option(False, "--follow", help="Descend through symlinked folders."),
    ext: Optional[List[str]] = typer.Option(
        None, "--ext", help="Only list files with this extension (repeatable)."
    ),
    match: Optional[List[str]] = typer.Option(
        None, "--match", help="Regex the relative path must match (repeatable)."
    ),
    skip: Optional[List[str]] = typer.Option(
        None, "--skip", help="Regex of relative paths to leave out, with their contents (repeatable)."
    ),
    keep_going: bool = typer.Option(
        False, "--keep-going", help="Report unreadable entries and continue instead of stopping."
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress the final summary line."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    List the entries below PATH, top-down, one '<kind><TAB><relative path>' line each.
    """
    _enable_verbose(verbose)

    errors: List[FilesystemError] = []

    def _report(err: FilesystemError) -> None:
        errors.append(err)
        typer.echo(f"Warning: {err}", err=True)

    try:
        options = WalkOptions(
            max_depth=max_depth,
            include_files=not no_files,
            include_dirs=not no_dirs,
            include_symlinks=not no_symlinks,
            follow_symlinks=follow,
            exts=tuple(ext or ()),
            match=tuple(match or ()),
            skip=tuple(skip or ()),
            on_error=_report if keep_going else None,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    count = 0
    try:
        walker = walk_service(FolderSpec(path), options)
        for spec in walker:
            typer.echo(f"{spec.kind.value}\t{walker.relative or '.'}")
            count += 1
    except FspecsError as e:
        _fail(e)

    if not quiet:
        summary = f"Walked {path}; listed {count} entries"
        if walker.pruned:
            summary += f"; pruned {len(walker.pruned)} revisited links"
        if errors:
            summary += f"; {len(errors)} errors"
        typer.echo(summary)


@app.command()
def detect(
    files: List[Path] = typer.Argument(..., help="Files to classify"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Print '<path><TAB><category>/<type>' for each file, judged by its leading bytes.
    """
    _enable_verbose(verbose)
    failed = 0
    for file in files:
        try:
            file_type = FileSpec(file).detect_type()
        except FspecsError as e:
            typer.echo(f"Error: {e}", err=True)
            failed += 1
            continue
        typer.echo(f"{file}\t{file_type}")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def copy(
    src: Path = typer.Argument(..., help="File or folder to copy"),
    dest: Path = typer.Argument(..., help="Destination file or folder"),
    conflict: str = typer.Option(
        "overwrite",
        "--conflict",
        help="When the destination exists: overwrite, skip, error, tilde or number.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Copy SRC to DEST; each file goes to a temporary sibling that is renamed into place.
    """
    _enable_verbose(verbose)
    strategy = _parse_strategy(conflict)
    try:
        result = safe_copy(src, dest, conflict=strategy)
    except FspecsError as e:
        _fail(e)
    if result is None:
        typer.echo(f"Skipped {src}: {dest} already exists")
    else:
        typer.echo(f"Copied {src} -> {result.path}")


@app.command()
def backup(
    file: Path = typer.Argument(..., help="File to back up"),
    strategy: str = typer.Option(
        "number", "--strategy", help="Backup naming: tilde (name~) or number (name-01.ext)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging"),
):
    """
    Copy FILE to a backup name next to it and print that name.
    """
    _enable_verbose(verbose)
    chosen = _parse_strategy(strategy, BACKUP_STRATEGIES)
    try:
        copy_spec = backup_file(FileSpec(file), strategy=chosen)
    except FspecsError as e:
        _fail(e)
    typer.echo(copy_spec.path)
