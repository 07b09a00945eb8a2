"""Service layer: revision engine, classification and LLM access."""
