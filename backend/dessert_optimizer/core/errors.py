class DomainError(ValueError):
    """Invalid request in a domain sense (no ingredients, unresolved names under the reject policy, etc.)."""
