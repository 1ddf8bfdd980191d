"""
Configuration for ownership inference.

Weights of the scoring passes; higher wins.
"""

OWNERSHIP_CONFIG = {
    "api_type_ref_weight": 3,        # Entity/enum used by an owned API endpoint
    "flow_step_mention_weight": 2,   # Entity name appearing in a flow step
    "flow_type_ref_weight": 3,       # Flow param/return type referencing an owned entity/enum
    "operation_type_ref_weight": 3,  # Operation param/return type referencing an owned entity/enum
    "operation_event_weight": 2,     # Operation emits/on an owned event
    "rule_mention_weight": 1,        # Entity name appearing in a rule clause
    "journey_wildcard": "*",         # Journey `from` that matches any screen
}
