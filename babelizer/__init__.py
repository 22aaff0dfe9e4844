"""Core logic for Babelizer, the Foundry VTT Babele data extractor.

The terminal UI lives in `app.py`. This package contains the parts that:
- unpack a compendium pack into loose JSON records
- resolve dotted source paths against those records
- reduce records into Babele translation entries
- drive the input form as a plain state machine
"""
