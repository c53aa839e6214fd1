"""Demo HTTP service that emits known failure log lines for alert-rule testing."""
