"""docsift -- classify a PDF or image and extract its content for an LLM."""

__version__ = "0.1.0"
