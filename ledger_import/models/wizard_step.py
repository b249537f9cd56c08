from __future__ import annotations

from enum import Enum

"""WizardStep enum for the import wizard.

State transitions:
    upload → mapping → preview → importing → complete
    preview → mapping (back), importing → preview (aborted run)
    any state except importing → upload (reset)
"""


class WizardStep(Enum):
    """Step pointer of an import wizard session.

    - UPLOAD: waiting for a file
    - MAPPING: file parsed, mappings proposed and editable
    - PREVIEW: rows transformed and validated, ready to commit
    - IMPORTING: commit loop running
    - COMPLETE: commit finished, outcome available
    """
    UPLOAD = "upload"
    MAPPING = "mapping"
    PREVIEW = "preview"
    IMPORTING = "importing"
    COMPLETE = "complete"
