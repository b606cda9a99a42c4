#!/usr/bin/python3
"""Environment configuration for the NDEF codec"""

import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Deepest smart poster nesting that is decoded or printed
NDEF_MAX_NESTING = int(os.getenv("NDEF_MAX_NESTING", "8"))
