"""Click commands registered on the sweep group."""
