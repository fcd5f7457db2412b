"""Press Import - Reconcile spreadsheet and text content into a content repository."""

import logging
import warnings

__version__ = "0.1.0"
__author__ = "Press Import Team"
__license__ = "Apache-2.0"

# Request lines are logged by the store client itself
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# openpyxl warns about data validation and header/footer parts on every read
warnings.filterwarnings("ignore", category=UserWarning, module="openpyxl")
