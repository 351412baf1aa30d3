"""Visual Notes: turns free text, PDFs and note images into diagram documents."""

__version__ = "0.1.0"
