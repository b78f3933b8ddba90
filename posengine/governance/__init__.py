from posengine.governance.authorizer import (
    ActionDecision,
    ActionNotPermittedError,
    ActionSet,
    can_add_product,
    can_execute,
    enforce,
    normalize_action,
    order_button_visibility,
    permitted_actions,
    product_button_visibility,
)

__all__ = [
    "ActionDecision",
    "ActionNotPermittedError",
    "ActionSet",
    "can_add_product",
    "can_execute",
    "enforce",
    "normalize_action",
    "order_button_visibility",
    "permitted_actions",
    "product_button_visibility",
]
