"""
Configuration for include resolution.
"""

RESOLVER_CONFIG = {
    "max_include_depth": 20,   # Deepest include nesting before MAX_DEPTH_EXCEEDED
    "extension": ".mfd",       # Appended when an include path has no extension
    "chain_separator": " → ",  # Joins basenames in include-chain breadcrumbs
}
