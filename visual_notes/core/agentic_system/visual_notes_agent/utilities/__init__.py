"""Model client, response parsing and deterministic document passes."""
