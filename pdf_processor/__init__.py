"""HTTP service that extracts page 2 of an uploaded PDF with pdftk."""

__version__ = "1.0.0"
