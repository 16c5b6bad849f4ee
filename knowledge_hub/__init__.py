"""Knowledge Hub: articles, categories, tags and an employee directory."""

__version__ = "0.1.0"
