"""
Core modules for the Merinfo company explorer.

Record ingestion and query engine used by both the CLI and the dashboard.

Submodules:
    core.models       - CompanyRecord and sub-entity dataclasses
    core.ingestion    - Whole-document / JSON Lines parser
    core.facets       - SNI and category vocabularies of a dataset
    core.annotations  - Status/comment/favorite overlay and its store
    core.filtering    - Filter settings and predicate
    core.sorting      - Sort tokens and comparator
    core.query        - Orchestrator: search -> filter -> sort
    core.loader       - File/URL reading and dataset loading
    core.storage      - SQLite key-value persistence
    core.preferences  - View mode, language and theme preferences
    core.formatting   - SEK and table formatting
    core.export       - CSV/JSON export of the visible set
    core.table        - pandas frame for the editable list view
    core.i18n         - Russian and Swedish dashboard strings
"""
