"""Pure, network-free stages of the caption pipeline.

WHY: Reference parsing, key scraping, track selection, and XML parsing are
where the platform's unversioned contracts live. Keeping them free of I/O
lets each contract be pinned down with plain string fixtures.

HOW: identifier.py resolves video IDs, keys.py scrapes the API key,
tracks.py validates and selects caption tracks, parser.py handles both
caption XML schemas, ir.py defines the output dataclasses.

RULES:
- No module here performs HTTP
- IR dataclasses are the contract — change with care
"""
