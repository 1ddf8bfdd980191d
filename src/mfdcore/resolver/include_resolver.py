"""
Include resolution.

Expands `include`/`import` directives into one merged document. Problems are
collected as ResolveError diagnostics and resolution always carries on with
whatever could be loaded.
"""

import os
from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

from mfdcore import ast
from mfdcore.exceptions import ParseError
from mfdcore.logging_config import logger
from .config import RESOLVER_CONFIG
from .schemas import ErrorLocation, ResolveError, ResolveErrorType, ResolveResult


def _empty_document() -> ast.Document:
    start = ast.SourceLocation(line=1, column=1, offset=0)
    return ast.Document(loc=ast.SourceRange(start=start, end=start), body=[])


class IncludeResolver:
    """
    Resolves a multi-file MFD model starting from a root file.

    An instance holds the state of one resolution (visited files and
    diagnostics); use one instance per concurrent resolution.
    """

    def __init__(
        self,
        parser,
        project_root: Optional[str] = None,
        max_depth: Optional[int] = None,
        extension: Optional[str] = None,
    ):
        """
        Initialize the include resolver.

        Args:
            parser: Object with parse(source, path) -> Document
            project_root: Includes resolving outside this directory are flagged
                (default: the root file's directory)
            max_depth: Maximum include nesting (default from config)
            extension: Extension appended to bare include paths (default from config)
        """
        self.parser = parser
        self.project_root = Path(project_root).resolve() if project_root else None
        self.max_depth = max_depth if max_depth is not None else RESOLVER_CONFIG["max_include_depth"]
        self.extension = extension or RESOLVER_CONFIG["extension"]

        self._visited: Set[Path] = set()
        self._files: List[str] = []
        self._errors: List[ResolveError] = []
        self._project_dir: Path = Path.cwd()

    def _reset(self, root: Path) -> None:
        self._visited = set()
        self._files = []
        self._errors = []
        self._project_dir = self.project_root or root.parent

    def resolve_file(self, root_path) -> ResolveResult:
        """
        Load, parse and resolve the file at root_path.

        Returns:
            ResolveResult; a missing or unparsable root yields an empty document
        """
        root = Path(root_path).resolve()
        self._reset(root)

        try:
            source = root.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._report(
                ResolveErrorType.FILE_NOT_FOUND,
                f"Root file could not be read: {e}",
                root,
                chain=[root],
            )
            return ResolveResult(document=_empty_document(), files=[], errors=list(self._errors))

        return self._resolve_root(source, root)

    def resolve_source(self, source: str, source_path) -> ResolveResult:
        """Resolve in-memory source text (e.g. an unsaved editor buffer) located at source_path."""
        root = Path(source_path).resolve()
        self._reset(root)
        return self._resolve_root(source, root)

    def _resolve_root(self, source: str, root: Path) -> ResolveResult:
        logger.info(f"Resolving includes from {root}")

        self._visited.add(root)
        self._files.append(str(root))

        doc = self._parse(source, root, chain=[root])
        if doc is None:
            document = _empty_document()
        else:
            document = doc.model_copy(update={"body": self._resolve_body(doc.body, root.parent, 0, [root])})

        logger.info(
            f"Resolved {len(self._files)} file(s) with {len(self._errors)} diagnostic(s)"
        )
        return ResolveResult(document=document, files=list(self._files), errors=list(self._errors))

    # ------------------------------------------------------------------
    # Tree rewriting
    # ------------------------------------------------------------------

    def _resolve_body(self, items: Sequence, base_dir: Path, depth: int, chain: List[Path]) -> list:
        """Resolve a document body: systems hoist, components and includes splice."""
        body = []
        for item in items:
            if isinstance(item, ast.SystemDecl):
                system, hoisted = self._resolve_system(item, base_dir, depth, chain)
                # Hoisted items go immediately BEFORE the system
                body.extend(hoisted)
                body.append(system)
            elif isinstance(item, ast.ComponentDecl):
                body.append(self._resolve_component(item, base_dir, depth, chain))
            elif isinstance(item, ast.IncludeDecl):
                body.extend(self._resolve_include(item, base_dir, depth, chain))
            else:
                body.append(item)
        return body

    def _resolve_system(
        self, system: ast.SystemDecl, base_dir: Path, depth: int, chain: List[Path]
    ) -> Tuple[ast.SystemDecl, list]:
        body = []
        hoisted = []
        for item in system.body:
            if isinstance(item, ast.IncludeDecl):
                for inc in self._resolve_include(item, base_dir, depth, chain):
                    if isinstance(inc, (ast.ComponentDecl, ast.SemanticComment)):
                        body.append(inc)
                    else:
                        # Shared enums/entities from files without a component
                        # block cannot live inside a system
                        hoisted.append(inc)
            elif isinstance(item, ast.ComponentDecl):
                body.append(self._resolve_component(item, base_dir, depth, chain))
            else:
                body.append(item)
        return system.model_copy(update={"body": body}), hoisted

    def _resolve_component(
        self, component: ast.ComponentDecl, base_dir: Path, depth: int, chain: List[Path]
    ) -> ast.ComponentDecl:
        if not any(isinstance(item, ast.IncludeDecl) for item in component.body):
            return component
        body = []
        for item in component.body:
            if isinstance(item, ast.IncludeDecl):
                body.extend(self._resolve_include(item, base_dir, depth, chain))
            else:
                body.append(item)
        return component.model_copy(update={"body": body})

    # ------------------------------------------------------------------
    # Single include
    # ------------------------------------------------------------------

    def _resolve_include(
        self, incl: ast.IncludeDecl, base_dir: Path, depth: int, chain: List[Path]
    ) -> list:
        """Items contributed by one include directive (empty on any problem)."""
        file_path = incl.path
        including = chain[-1]

        if os.path.isabs(file_path):
            self._report(
                ResolveErrorType.SUSPICIOUS_PATH,
                f"Include uses absolute path '{file_path}', use relative paths instead",
                Path(file_path),
                chain=chain,
                included_from=including,
            )

        if not file_path.endswith(self.extension):
            file_path += self.extension

        abs_path = (base_dir / file_path).resolve()

        try:
            abs_path.relative_to(self._project_dir)
        except ValueError:
            self._report(
                ResolveErrorType.SUSPICIOUS_PATH,
                f"Include '{file_path}' resolves outside project directory",
                abs_path,
                chain=chain,
                included_from=including,
            )

        if depth >= self.max_depth:
            self._report(
                ResolveErrorType.MAX_DEPTH_EXCEEDED,
                f"Include nesting exceeds maximum depth of {self.max_depth}",
                abs_path,
                chain=chain + [abs_path],
                included_from=including,
            )
            return []

        if abs_path in chain:
            self._report(
                ResolveErrorType.CIRCULAR_INCLUDE,
                f"Circular include detected: {file_path}",
                abs_path,
                chain=chain + [abs_path],
                included_from=including,
            )
            return []

        if abs_path in self._visited:
            logger.debug(f"Skipping {abs_path}: already included (from {including.name})")
            return []

        if not abs_path.is_file():
            self._report(
                ResolveErrorType.FILE_NOT_FOUND,
                f"Include file not found: {file_path}",
                abs_path,
                chain=chain,
                included_from=including,
            )
            return []

        self._visited.add(abs_path)
        self._files.append(str(abs_path))

        try:
            source = abs_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._report(
                ResolveErrorType.FILE_NOT_FOUND,
                f"Include file could not be read: {file_path} ({e})",
                abs_path,
                chain=chain,
                included_from=including,
            )
            return []

        child_chain = chain + [abs_path]
        doc = self._parse(source, abs_path, chain=child_chain)
        if doc is None:
            return []

        logger.debug(f"Included {abs_path.name} at depth {depth + 1}")
        return self._resolve_body(doc.body, abs_path.parent, depth + 1, child_chain)

    def _parse(self, source: str, path: Path, chain: List[Path]) -> Optional[ast.Document]:
        try:
            return self.parser.parse(source, str(path))
        except ParseError as e:
            location = ErrorLocation(line=e.line, column=e.column) if e.location else None
            where = f"{path}:{e.line}:{e.column}" if e.location else str(path)
            self._report(
                ResolveErrorType.PARSE_ERROR,
                f"Parse error in {where}: {e.message}",
                path,
                chain=chain,
                included_from=chain[-2] if len(chain) > 1 else None,
                location=location,
            )
        except Exception as e:
            self._report(
                ResolveErrorType.PARSE_ERROR,
                f"Parse error in {path}: {e}",
                path,
                chain=chain,
                included_from=chain[-2] if len(chain) > 1 else None,
            )
        return None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _format_chain(self, chain: Sequence[Path]) -> Tuple[str, ...]:
        return tuple(p.name for p in chain)

    def _report(
        self,
        error_type: ResolveErrorType,
        message: str,
        file: Path,
        chain: Sequence[Path],
        included_from: Optional[Path] = None,
        location: Optional[ErrorLocation] = None,
    ) -> None:
        names = self._format_chain(chain)
        breadcrumb = RESOLVER_CONFIG["chain_separator"].join(names)
        error = ResolveError(
            type=error_type,
            message=f"{message} (chain: {breadcrumb})",
            file=str(file),
            included_from=str(included_from) if included_from else None,
            location=location,
            include_chain=names,
        )
        logger.warning(error.format())
        self._errors.append(error)
