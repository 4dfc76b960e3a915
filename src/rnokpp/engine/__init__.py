"""Rule pipeline and the Validator that orchestrates a single check."""
