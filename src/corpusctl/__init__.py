"""corpusctl — frontmatter validation and content graph checks for a docs corpus."""

__version__ = "0.1.0"
