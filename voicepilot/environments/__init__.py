"""
Environments Module - the world outside the automation core.

Architecture Overview:
======================
environments/
├── __init__.py
└── browser/
    ├── opener.py   # ResourceOpener contract + Playwright implementation
    └── media.py    # MediaController contract + UI websocket implementation

The core only ever sees the abstract contracts; tests swap in fakes.
"""
