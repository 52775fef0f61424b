# ==============================================
# PROPERTIES (human-editable YAML configuration)
# ==============================================
#
# Modules:
# --------
# - document.py  → comment-preserving line model of a properties file
# - template.py  → Template / TemplateField (defaults + comments)
# - store.py     → PropertiesStore (create, repair, reconcile, get/set)
#
# ==============================================

from .document import Document, Entry, PropertiesParseError
from .template import Template, TemplateField
from .store import PropertiesStore

__all__ = [
    "Document",
    "Entry",
    "PropertiesParseError",
    "Template",
    "TemplateField",
    "PropertiesStore",
]
