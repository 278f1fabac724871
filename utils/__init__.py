"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_utc
from utils.user_context import (
    get_current_user_id,
    peek_current_user_id,
    set_current_user_id,
    clear_current_user_id,
    user_context,
)
from utils.money import to_decimal, is_finite, settle, working_precision
