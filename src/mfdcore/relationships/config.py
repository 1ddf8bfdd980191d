"""
Configuration for relationship graph construction.
"""

GRAPH_CONFIG = {
    # Flow step actions that are keywords, never operation calls
    "flow_reserved_actions": ("emit", "return"),
    # Rule clause actions that are keywords, never operation calls
    "rule_reserved_actions": ("emit", "deny"),
    # Journey/action targets that are not screens
    "screen_sentinels": ("end", "*"),
}
