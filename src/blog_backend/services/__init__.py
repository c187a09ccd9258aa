"""Domain services: credentials, tokens, content and favorites."""
