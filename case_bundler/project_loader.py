"""
Project Loader

Reads a saved project file (JSON) into a CaseCollection and links every
source entry to its PDF under a root folder. The PDF binaries themselves
are not read here; they are loaded lazily by the export pipeline.

Project file layout:
    {
      "version": 4,
      "people": [{"name": "Jane Doe", "role": "Witness"}, ...],
      "docTypes": ["Report", ...],
      "facts": ["General evidence", ...],
      "files": [
        {
          "id": "f1", "fileName": "vol1.pdf", "relativePath": "case/vol1.pdf",
          "category": "Main Record", "categoryName": null, "volume": "1",
          "extractions": [
            {"id": "e1", "startPage": 3, "endPage": 5, "displayNumber": "0007",
             "articles": "12, 55", "docType": "Report", "summary": "",
             "people": ["Jane Doe"], "facts": []}
          ]
        }
      ]
    }

Older projects stored a single "fact" per extraction; it is read as a
one-item "facts" list. Missing vocabularies fall back to
config/vocabulary.yaml.
"""

from __future__ import annotations

import json
from pathlib import Path

from case_bundler.config import load_default_vocabulary
from case_bundler.logging_config import debug_log, info, warning
from case_bundler.models import (
    CaseCollection,
    DocCategory,
    Extraction,
    Person,
    SourceDocument,
    SourceLocation,
)


def _parse_person(raw) -> Person:
    if isinstance(raw, str):
        return Person(name=raw)
    return Person(name=str(raw.get('name', '')), role=str(raw.get('role') or raw.get('type') or ''))


def _parse_extraction(raw: dict) -> Extraction:
    facts = raw.get('facts')
    if facts is None and raw.get('fact'):
        facts = [raw['fact']]
    extraction = Extraction(
        start_page=int(raw['startPage']),
        end_page=int(raw['endPage']),
        display_number=str(raw.get('displayNumber', '')),
        articles=raw.get('articles') or '',
        doc_type=raw.get('docType') or '',
        summary=raw.get('summary') or '',
        people=list(raw.get('people') or []),
        facts=list(facts or []),
    )
    if raw.get('id'):
        extraction.extraction_id = str(raw['id'])
    return extraction


def _parse_document(raw: dict) -> SourceDocument:
    location = SourceLocation(
        category=DocCategory.parse(raw.get('category', DocCategory.MAIN_RECORD)),
        group_name=raw.get('categoryName') or None,
        volume=str(raw.get('volume', '')),
    )
    return SourceDocument(
        file_id=str(raw['id']),
        location=location,
        file_name=raw.get('fileName') or '',
        extractions=[_parse_extraction(e) for e in raw.get('extractions', [])],
    )


def _pdf_index(root: Path) -> dict[str, Path]:
    """Lower-cased file name -> first matching PDF under root (sorted walk)."""
    index: dict[str, Path] = {}
    for path in sorted(root.rglob('*')):
        if path.is_file() and path.suffix.lower() == '.pdf':
            index.setdefault(path.name.lower(), path)
    return index


def link_sources(case: CaseCollection, root: Path, relative_paths: dict[str, str] | None = None) -> int:
    """
    Attach a PDF path to every unlinked source document.

    Tries root/relativePath first, then any PDF with the same file name
    below root. Unmatched documents keep path=None.

    Returns:
        Number of documents linked.
    """
    relative_paths = relative_paths or {}
    root = Path(root)
    index = None
    linked = 0

    for document in case.documents:
        if document.path is not None or document.data is not None:
            continue
        relative = relative_paths.get(document.file_id)
        if relative and (root / relative).is_file():
            document.path = root / relative
        elif document.file_name:
            if index is None:
                index = _pdf_index(root)
            document.path = index.get(document.file_name.lower())

        if document.path is not None:
            linked += 1
            debug_log(f"[LOADER] Linked {document.file_id} -> {document.path}")
        else:
            warning(f"[LOADER] No PDF found for {document.file_id} ({document.file_name or 'unnamed'})")
    return linked


def load_project(project_path: Path | str, root: Path | str | None = None) -> CaseCollection:
    """
    Load a saved project and link its PDFs.

    Args:
        project_path: Project JSON file.
        root: Folder holding the case PDFs (defaults to the project's folder).

    Returns:
        The loaded CaseCollection.

    Raises:
        FileNotFoundError: The project file does not exist.
        ValueError: The project file is not valid project JSON.
    """
    project_path = Path(project_path)
    with open(project_path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid project file {project_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Invalid project file {project_path}: expected an object")

    defaults = load_default_vocabulary()
    try:
        raw_files = data.get('files') or []
        case = CaseCollection(
            documents=[_parse_document(raw) for raw in raw_files],
            doc_types=list(data.get('docTypes') or defaults['doc_types']),
            facts=list(data.get('facts') or defaults['facts']),
            people=[_parse_person(p) for p in data.get('people') or []],
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid project file {project_path}: missing or malformed {e}") from e

    relative_paths = {str(raw['id']): raw['relativePath'] for raw in raw_files if raw.get('relativePath')}
    linked = link_sources(case, Path(root) if root else project_path.parent, relative_paths)
    info(f"[LOADER] Loaded {len(case.documents)} documents, {case.extraction_count} extractions, "
         f"{linked} linked")
    return case
