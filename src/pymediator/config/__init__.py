"""Configuration — settings, config file discovery, logging setup."""
