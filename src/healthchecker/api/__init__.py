"""HTTP API exposing health reports as JSON."""
