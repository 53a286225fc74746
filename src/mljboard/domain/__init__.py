"""Domain layer: identities, ranges, results, exceptions and ports."""
