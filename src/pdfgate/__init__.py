"""pdfgate: HTML templates rendered to PDF through a shared headless Chromium."""

__version__ = "0.1.0"
