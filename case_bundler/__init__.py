"""
CaseBundler - split classified judicial case PDFs into indexed archives.

Packages:
    models   - case data (documents, extractions, search results)
    export   - naming, page slicing, batching, archive assembly, orchestration
    reports  - Word and Excel indices
"""

__version__ = "1.0.0"
