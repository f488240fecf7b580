"""Core data models and text helpers shared by all stages."""
