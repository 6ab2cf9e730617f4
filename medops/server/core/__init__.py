"""Server core: configuration, constants, security and access control."""
