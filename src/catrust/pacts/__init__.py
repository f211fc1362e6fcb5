"""Public contracts — value types and helpers shared across modules."""
