"""
incomedash: descriptive statistics dashboard for the Adult Census Income dataset.

This package provides:
- A cleaned, immutable record model and CSV loader
- Pure aggregation functions (counts, high-income rates, five-number summaries)
- Band and linear scales plus chart geometry for rendering
- A Plotly figure generator and a NiceGUI dashboard app
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from incomedash.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from incomedash.utils.logging import configure_logging, get_logger

# NullHandler so logs don't propagate to root when no application has
# configured logging. The dashboard app calls configure_logging().
_logger = logging.getLogger("incomedash")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
