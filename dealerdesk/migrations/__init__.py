"""Schema creation and versioned migrations (run out-of-band)."""
