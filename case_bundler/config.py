"""
CaseBundler Configuration Module
Centralized configuration for the application.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "CaseBundler"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Ensure directories exist
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# Logging Configuration
LOG_FILE = LOGS_DIR / "processing.log"
DEBUG_FLOW_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# ============================================================================
# Export Batching
# ============================================================================
# Each archive holds at most this many extractions. Bounds peak memory and
# archive size only; batches freely split a source document's extractions.
MAX_EXTRACTIONS_PER_ARCHIVE = 40

# Pauses let the garbage collector reclaim sliced PDFs before continuing.
SOURCE_PAUSE_SECONDS = 0.02   # Between source documents inside a batch
BATCH_PAUSE_SECONDS = 0.1     # Between delivered batches

# ============================================================================
# Classification Defaults
# ============================================================================
# Substituted when an extraction has no fact association
SENTINEL_FACT = "General evidence"

# Fixed file-name segment for the primary category
MAIN_RECORD_SEGMENT = "Main_Record"

# Placeholder for groups saved without a name
UNNAMED_GROUP = "Unnamed"

# ============================================================================
# Archive Layout
# ============================================================================
FOLDER_BY_LOCATION = "01_By_Location"
FOLDER_BY_DOC_TYPE = "02_By_Document_Type"
FOLDER_BY_FACT = "03_By_Fact"
FOLDER_BY_PERSON = "04_By_Person"
FOLDER_SEARCH_DOCUMENTS = "Search_Documents"

FULL_EXPORT_PREFIX = "Full_Case"
SEARCH_EXPORT_PREFIX = "Search_Results"

INDEX_DOCX_NAME = "00_General_Index.docx"
INDEX_XLSX_NAME = "00_General_Index.xlsx"
SEARCH_DOCX_NAME = "00_Search_Report.docx"
SEARCH_XLSX_NAME = "00_Search_Report.xlsx"

# Manifest name must carry the batch number
MANIFEST_NAME_TEMPLATE = "batch_{number}_data.json"

# ============================================================================
# Default Vocabulary (doc types and facts)
# ============================================================================
VOCABULARY_FILE = Path(__file__).parent.parent / "config" / "vocabulary.yaml"

_FALLBACK_DOC_TYPES = [
    "Document",
    "Expert report",
    "Order",
    "Report",
    "Statement",
]
_FALLBACK_FACTS = [SENTINEL_FACT]

_VOCABULARY: dict = {}


def load_default_vocabulary() -> dict:
    """
    Loads the default doc-type and fact vocabularies from config/vocabulary.yaml.

    Returns:
        Dict with 'doc_types' and 'facts' lists. Falls back to built-in
        lists when the file is missing or malformed.
    """
    global _VOCABULARY
    if _VOCABULARY:
        return _VOCABULARY

    try:
        with open(VOCABULARY_FILE, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        doc_types = data.get('doc_types') or _FALLBACK_DOC_TYPES
        facts = data.get('facts') or _FALLBACK_FACTS
        _VOCABULARY = {
            'doc_types': sorted(str(label) for label in doc_types),
            'facts': [str(label) for label in facts],
        }
        if DEBUG_MODE:
            from case_bundler.logging_config import debug_log
            debug_log(f"[Config] Loaded {len(_VOCABULARY['doc_types'])} doc types from {VOCABULARY_FILE}")
    except FileNotFoundError:
        if DEBUG_MODE:
            from case_bundler.logging_config import debug_log
            debug_log(f"[Config] WARNING: Vocabulary file not found at {VOCABULARY_FILE}. Using fallback values.")
        _VOCABULARY = {'doc_types': list(_FALLBACK_DOC_TYPES), 'facts': list(_FALLBACK_FACTS)}
    except (yaml.YAMLError, AttributeError, TypeError) as e:
        from case_bundler.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to load or parse vocabulary file: {e}")
        _VOCABULARY = {'doc_types': list(_FALLBACK_DOC_TYPES), 'facts': list(_FALLBACK_FACTS)}

    return _VOCABULARY
