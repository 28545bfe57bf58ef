"""Core components: settings, exceptions and the content store client."""
