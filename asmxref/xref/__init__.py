"""Parser-free cross-referencing of assembler labels.

Modules:
    comments: Comment removal that keeps code columns intact
    types: Position, Range and edit value types
    line_source: Lines of a file from an open document or the disk
    patterns: Search, label and scope regular expressions
    grep_engine: Multi-file and single-document search
    modules: MODULE/STRUCT nesting and label qualification
    reducer: Reduction of grep hits to the references of one symbol
    references: Reference and unreferenced-label search
    rename: Renaming of all references of a symbol

The host package depends on the value types defined here, so this package
does not import its submodules eagerly.
"""
