"""Services that sequence the engine for the presentation layer."""
