"""Intent relay: classify, fan out, gather, and consolidate user requests."""
