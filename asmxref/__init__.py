"""asmxref - symbol cross-references and renaming for assembly sources.

Finds the references of a label across a project and renames them,
resolving MODULE/STRUCT qualification by scanning the sources instead of
parsing them.
"""

__version__ = "0.1.0"
SCRIPT_NAME = "asmxref"

__all__ = [
    "__version__",
    "SCRIPT_NAME",
]
