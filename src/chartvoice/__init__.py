"""Voice/text command engine for diagram editing."""
